"""
Centralized runtime settings for catalog loading and calculator output.

Reference thresholds live in anchors.ANCHORS; the values here are knobs a
tool or test may change at runtime through the setters below.
"""
import os

from .anchors import ANCHORS

# --- Catalog location ---
# Brand catalogs shipped with the package: one JSON file per brand.
PACKAGE_DATA_DIR: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
CATALOG_DIR: str = PACKAGE_DATA_DIR

# Brand used by the CLI when --brand is omitted
DEFAULT_BRAND: str = "Panelli"

# --- Catalog audit ---
# When True, any load-time audit issue aborts loading instead of logging a warning.
STRICT_CATALOG: bool = False

# --- Rounding of reported values ---
DERATING_DIGITS: int = 3   # derating factor
UNBALANCE_DIGITS: int = 2  # % unbalance
INDEX_DIGITS: int = 2      # PI / DAR

# --- Insulation readings required for the indices [s] ---
REQUIRED_READINGS_S: tuple[int, ...] = (
    int(ANCHORS["T_DAR_SHORT_S"]),
    int(ANCHORS["T_ONE_MIN_S"]),
    int(ANCHORS["T_TEN_MIN_S"]),
)


def set_catalog_dir(path: str | None) -> None:
    """Point catalog loading at another directory. None restores the packaged data.

    Callers holding the cached registry must call catalog.reset_registry_cache().
    """
    global CATALOG_DIR
    if path is None:
        CATALOG_DIR = PACKAGE_DATA_DIR
        return
    if not os.path.isdir(path):
        raise ValueError(f"Catalog directory does not exist: '{path}'")
    CATALOG_DIR = os.path.abspath(path)


def set_strict_catalog(strict: bool) -> None:
    global STRICT_CATALOG
    STRICT_CATALOG = bool(strict)
