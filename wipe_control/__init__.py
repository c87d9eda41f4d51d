"""
Wipe Control Package.

Nozzle wipe planning for 3D-printer motion preprocessing.  Given the
stream of print-head positions, decides how far back along the printed
path a wipe can run and which motion/extrusion steps it needs so the
configured retraction is consumed exactly.

Subpackages:
    wipe_ir: Position input and WipeStep output value types
    wiper: History, clipping and wipe step generation
    configs: Settings schema and wiper.yaml loading
    utils: Logging setup and YAML helpers
"""

__all__ = ["wipe_ir", "wiper", "configs", "utils"]
