"""
Configuration management for epub-pagelist.
"""

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class PageListConfig:
    """Page list parsing and lookup configuration."""
    nav_type: str = "page-list"  # epub:type token of the page-list <nav>
    nav_role: str = "doc-pagelist"  # ARIA role accepted as an alternative
    cfi_marker: str = "epubcfi"  # substring that marks an href as a CFI link
    html_parser: str = "html.parser"  # BeautifulSoup feature for XHTML nav documents
    percentage_precision: int = 3  # decimal places kept by percentage_from_page
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.percentage_precision < 0:
            raise ValueError(
                f"percentage_precision must be >= 0, got {self.percentage_precision}"
            )
        if not self.cfi_marker:
            raise ValueError("cfi_marker must not be empty")


DEFAULT_CONFIG = PageListConfig()


def load_config(config_path: Path) -> PageListConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        PageListConfig instance
    """
    config_path = Path(config_path)
    if not config_path.exists():
        # Return default configuration
        return PageListConfig()

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")

    return PageListConfig(
        nav_type=data.get('nav_type', 'page-list'),
        nav_role=data.get('nav_role', 'doc-pagelist'),
        cfi_marker=data.get('cfi_marker', 'epubcfi'),
        html_parser=data.get('html_parser', 'html.parser'),
        percentage_precision=int(data.get('percentage_precision', 3)),
        log_level=data.get('log_level', 'INFO'),
        log_file=data.get('log_file'),
    )
