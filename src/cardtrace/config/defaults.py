"""
cardtrace.config.defaults - Default configuration values.
"""

CONFIG_FILE_NAME = ".cardtrace.toml"

DEFAULT_CONFIG = {
    "conversion": {
        "strategy": "rule",
        "max_title_length": 20,
    },
    "relations": {
        # Per-relation ceiling on left_ids x right_ids; 0 disables the check
        "max_links": 10000,
    },
    "project": {
        "output_dir": ".",
    },
    "logging": {
        "level": "WARNING",
    },
}
