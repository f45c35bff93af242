from .mirror import (
    MirrorTable,
    apply_mirrors,
    enable_mirror,
    normalize_url,
    register_mirrors,
)
from .script import GradlePackageManager, parse_init_script, render_init_script

__all__ = [
    "MirrorTable",
    "apply_mirrors",
    "enable_mirror",
    "normalize_url",
    "register_mirrors",
    "GradlePackageManager",
    "parse_init_script",
    "render_init_script",
]
