"""
specatlas.config.defaults - Default configuration values.
"""

DEFAULT_CONFIG = {
    "project": {
        "name": "",
    },
    "directories": {
        "specs": "specs",
    },
    "search": {
        "limit": 20,
        # Edit distance for plain words; 0 disables fuzzy matching
        "fuzzy_distance": 0,
        "min_score": 0.0,
    },
    "deps": {
        "depth": 3,
    },
    "validation": {
        # Report dependency cycles as errors instead of warnings
        "strict_cycles": False,
    },
}
