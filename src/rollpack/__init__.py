"""Parametric 3D layout and geometry of palletized roll packs."""
from rollpack.model.pack_config import GapMode, PackConfig, parse_pack_config
from rollpack.model.pack_scene import PackAssembler, PackScene, assemble_pack

__all__ = [
    "GapMode",
    "PackAssembler",
    "PackConfig",
    "PackScene",
    "assemble_pack",
    "parse_pack_config",
]
