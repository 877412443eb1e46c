"""
拓扑地图：
- 读取器、载波源与各类环境物联网设备的俯视位置
- 设备到其读取器（以及双站式设备到载波源）的绑定连线
"""

import os

import plotly.graph_objects as go

from ambient_iot.core.AmbientDevice import DeviceRole

ROLE_MARKERS = {
    DeviceRole.CARRIER_SOURCE: dict(symbol='diamond', size=12, color='#ff7f0e'),
    DeviceRole.ACTIVE_TRANSMITTER: dict(symbol='circle', size=7, color='#d62728'),
    DeviceRole.MONOSTATIC_BACKSCATTER: dict(symbol='circle', size=6, color='#1f77b4'),
    DeviceRole.BISTATIC_BACKSCATTER: dict(symbol='circle', size=6, color='#2ca02c'),
}


def build_topology_figure(network, show_links=True):
    """
    Builds a top-down plotly map of the network.

    Args:
        network (AmbientNetwork): The bound topology.
        show_links (bool): Draw device -> reader and bistatic device -> carrier lines.

    Returns:
        go.Figure: The map.
    """
    registry = network.registry
    fig = go.Figure()

    # 绑定连线放在最底层
    if show_links:
        reader_x, reader_y, carrier_x, carrier_y = [], [], [], []
        for device in registry:
            reader = network.reader_of(device)
            if reader is not None:
                reader_x += [device.position[0], reader.position[0], None]
                reader_y += [device.position[1], reader.position[1], None]
            carrier = registry.carrier_of(device)
            if carrier is not None:
                carrier_x += [device.position[0], carrier.position[0], None]
                carrier_y += [device.position[1], carrier.position[1], None]
        fig.add_trace(go.Scatter(x=reader_x, y=reader_y, mode='lines', name='reader link',
                                 line=dict(color='rgba(100,100,100,0.3)', width=1), hoverinfo='skip'))
        fig.add_trace(go.Scatter(x=carrier_x, y=carrier_y, mode='lines', name='carrier link',
                                 line=dict(color='rgba(255,127,14,0.35)', width=1, dash='dot'), hoverinfo='skip'))

    for role, marker in ROLE_MARKERS.items():
        devices = registry.by_role(role)
        if not devices:
            continue
        fig.add_trace(go.Scatter(
            x=[d.position[0] for d in devices],
            y=[d.position[1] for d in devices],
            mode='markers', name=role.value, marker=marker,
            text=[f"{d.name}<br>rate={d.harvest_rate:.3e} J/s" for d in devices],
            hoverinfo='text',
        ))

    fig.add_trace(go.Scatter(
        x=[r.position[0] for r in network.readers],
        y=[r.position[1] for r in network.readers],
        mode='markers+text', name='reader',
        marker=dict(symbol='square', size=14, color='black'),
        text=[r.name for r in network.readers], textposition='top center',
    ))

    fig.update_layout(
        title='Ambient IoT Topology (meters)',
        xaxis=dict(title='X (m)', scaleanchor='y', scaleratio=1, zeroline=True),
        yaxis=dict(title='Y (m)', zeroline=True),
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='left', x=0),
        margin=dict(l=40, r=40, t=80, b=40),
    )
    return fig


def plot_topology_map(network, output_path='results/topology_map.html'):
    """Writes the topology map as HTML and returns the path."""
    fig = build_topology_figure(network)
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.write_html(output_path)
    print(f"Saved: {output_path}")
    return output_path
