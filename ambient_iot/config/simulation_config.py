"""
Simulation Configuration for the Ambient IoT energy-eligibility model.
Active devices harvest ambient RF energy to transmit; backscatter devices
reflect a carrier wave (monostatic: reader is the carrier, bistatic: a
separate carrier source).
"""

import numpy as np

# ==============================================================================
# 环境能量采集配置
# ==============================================================================
class HarvestConfig:
    # 环境能量密度（单位：焦耳/(秒*平方厘米)），默认 1 mW/cm²
    ENERGY_DENSITY = 0.001
    # 距离下限（单位：米），避免在零距离处除以零
    MIN_DISTANCE_M = 0.1

# ==============================================================================
# 读取器（基站）配置
# ==============================================================================
class ReaderConfig:
    # 固定位置，30 米高
    POSITIONS = [
        np.array([0.0, 0.0, 30.0]),
        np.array([866.0, 500.0, 30.0]),
        np.array([-866.0, 500.0, 30.0]),
    ]

# ==============================================================================
# 载波源配置
# ==============================================================================
class CarrierConfig:
    # 固定位置，10 米高
    POSITIONS = [
        np.array([-300.0, -300.0, 10.0]),
        np.array([300.0, -300.0, 10.0]),
        np.array([-300.0, 300.0, 10.0]),
        np.array([300.0, 300.0, 10.0]),
        np.array([0.0, 0.0, 10.0]),
    ]

# ==============================================================================
# 环境物联网设备配置
# ==============================================================================
class DeviceConfig:
    # 各类设备数量
    NUM_ACTIVE = 20
    NUM_MONOSTATIC = 40
    NUM_BISTATIC = 40
    # 圆盘随机部署中心（单位：米）
    DISC_CENTER = (0.0, 0.0)
    # 各类设备的部署半径范围 [min, max]（单位：米）
    ACTIVE_RHO = (0.0, 500.0)
    MONOSTATIC_RHO = (0.0, 200.0)
    BISTATIC_RHO = (200.0, 800.0)
    # 设备高度（单位：米）
    DEVICE_HEIGHT = 0.0
    # 初始储能（单位：焦耳）
    INITIAL_ENERGY_J = 0.0
    # 传输能耗 = 传输阈值（单位：焦耳/次）
    ACTIVE_TX_COST_J = 0.1       # 主动传输需要更多能量
    BACKSCATTER_TX_COST_J = 0.01  # 反向散射只需要很少的能量

# ==============================================================================
# 仿真控制
# ==============================================================================
class SimConfig:
    # 功能开关
    ENABLE_LOGGING = True           # 是否输出 Markdown 仿真日志
    ENABLE_PLOT_RESULTS = True      # 是否在仿真结束后绘制结果曲线
    ENABLE_SCENE_VIZ = False        # 是否导出拓扑地图（plotly HTML）
    # 总仿真时间 (单位：秒)
    SIMULATION_TIME_S = 3600.0
    # 首次传输检查的基准偏移 (单位：秒)
    START_OFFSET_S = 60.0
    # 错开启动时间的周期：start = offset + (i % period)
    STAGGER_PERIOD = 60
    # 载波源首次检查时间 (单位：秒)
    CARRIER_CHECK_TIME_S = 10.0
    # 周期性上报间隔 (单位：秒)，None 表示每个设备只检查一次
    REPORT_INTERVAL_S = 600.0
    # 载波源检查间隔 (单位：秒)，None 表示只检查一次
    CARRIER_INTERVAL_S = 600.0
    # 进度打印间隔 (单位：秒)
    PROGRESS_INTERVAL_S = 600.0
    # 用于可复现性的随机种子
    RANDOM_SEED = 42
    # 日志与结果输出目录
    LOG_DIR = "logs"
    RESULTS_DIR = "results"
