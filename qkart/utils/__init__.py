"""
Utility modules for the QKart storefront
"""
from .config_loader import StorefrontConfig, load_storefront_config

__all__ = [
    'StorefrontConfig',
    'load_storefront_config',
]
