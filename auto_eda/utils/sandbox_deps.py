from importlib import metadata
from typing import Iterable, List, Optional

# Import names of the usual EDA stack; surfaced to the generator when installed.
COMMON_EDA_PACKAGES = [
    "pandas", "numpy", "scipy", "matplotlib", "seaborn", "statsmodels",
    "sklearn", "plotly", "missingno", "ydata_profiling", "tabulate",
]

# Distribution names that differ from their import names.
_DIST_TO_IMPORT = {
    "scikit-learn": "sklearn",
    "ydata-profiling": "ydata_profiling",
}


def get_installed_packages() -> List[str]:
    """Sorted import-style names of every distribution in the current environment."""
    names = set()
    for dist in metadata.distributions():
        name = (dist.metadata.get("Name") or "").strip()
        if not name:
            continue
        lowered = name.lower().replace("_", "-")
        names.add(_DIST_TO_IMPORT.get(lowered, lowered.replace("-", "_")))
    return sorted(names)


def get_available_packages(installed: Optional[Iterable[str]] = None) -> List[str]:
    """Common EDA packages that are actually installed, in COMMON_EDA_PACKAGES order."""
    pool = set(installed if installed is not None else get_installed_packages())
    return [name for name in COMMON_EDA_PACKAGES if name in pool]
