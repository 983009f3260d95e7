#!/usr/bin/env python3
"""
Settings loader for CodeGlow.
Supports configuration from codeglow.yml, codeglow.yaml, or codeglow.json files.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional

from .core import DEFAULT_OUTPUT_DIR, SUPPORTED_LANGUAGES
from .highlighter import DEFAULT_THEME


class CodeGlowSettings:
    """Load and manage CodeGlow configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'output': DEFAULT_OUTPUT_DIR,
        'theme': DEFAULT_THEME,
        'languages': sorted(SUPPORTED_LANGUAGES),
        'workers': 1,
        'strict': False,
        'log_file': None,
        'verbose': False,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['codeglow.yml', 'codeglow.yaml', 'codeglow.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = {key: (list(value) if isinstance(value, list) else value)
                         for key, value in self.DEFAULT_SETTINGS.items()}
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    if not isinstance(loaded_settings, dict):
                        raise ValueError("top level must be a mapping")
                    # Merge with defaults, giving preference to loaded settings
                    merged = {**self.settings, **loaded_settings}
                    merged['languages'] = self._normalize_languages(merged['languages'])
                    self.settings = merged
                    print(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except Exception as e:
                print(f"Warning: Failed to load config file {config_file}: {e}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        try:
            file_ext = os.path.splitext(config_path)[1].lower()

            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise IOError(f"Error reading configuration file {config_path}: {e}")

    @staticmethod
    def _normalize_languages(value):
        """Accept a list or a comma-separated string of language tags."""
        if isinstance(value, str):
            value = value.split(',')
        elif not isinstance(value, (list, tuple)):
            raise ValueError(f"'languages' must be a list or comma-separated string, got {value!r}")
        return [str(lang).strip() for lang in value if str(lang).strip()]

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        if file_format not in ['yml', 'yaml', 'json']:
            raise ValueError(f"Unsupported config file format: {file_format}")

        filename = f'codeglow.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# CodeGlow Configuration File\n")
                    f.write("# Build-time syntax highlighting for generated HTML\n\n")
                    f.write("# Directory holding the generated site\n")
                    f.write(f"output: {DEFAULT_OUTPUT_DIR}\n\n")
                    f.write("# Pygments style used for highlighted blocks\n")
                    f.write(f"theme: {DEFAULT_THEME}\n\n")
                    f.write("# Only blocks tagged with one of these languages are highlighted\n")
                    f.write("languages:\n")
                    for lang in sorted(SUPPORTED_LANGUAGES):
                        f.write(f"  - {lang}\n")
                    f.write("\n# Processing settings\n")
                    f.write("workers: 1\n")
                    f.write("strict: false  # exit non-zero when any block fails\n")
                elif file_format == 'json':
                    sample_config = {
                        'output': DEFAULT_OUTPUT_DIR,
                        'theme': DEFAULT_THEME,
                        'languages': sorted(SUPPORTED_LANGUAGES),
                        'workers': 1,
                        'strict': False,
                    }
                    json.dump(sample_config, f, indent=2)
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")
        except (IOError, OSError) as e:
            raise IOError(f"Error writing configuration file {config_path}: {e}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None:
                if key == 'languages':
                    merged[key] = self._normalize_languages(value)
                else:
                    merged[key] = value

        return merged
