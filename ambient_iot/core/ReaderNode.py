"""
Reader node (base station) that receives device transmissions.
"""

import numpy as np


class ReaderNode:
    def __init__(self, reader_id, position, name=None):
        """
        Initializes a reader node.

        Args:
            reader_id (int): Index of the reader in the network's reader list.
            position (array-like): 3D coordinates of the reader.
            name (str, optional): Display name, defaults to ``BS_<reader_id>``.
        """
        self.reader_id = reader_id
        self.position = np.array(position, dtype=float)
        self.name = name if name is not None else f"BS_{reader_id}"

    def __repr__(self):
        return f"ReaderNode(ID={self.name}, Position={self.position})"
