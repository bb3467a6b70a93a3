"""Shared pytest fixtures."""

import copy
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from PyQt6.QtCore import QCoreApplication

from orae.config.config_loader import ConfigLoader


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """QCoreApplication for timer-driven models."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture(scope="session")
def base_config():
    config = ConfigLoader().load()
    config['logging']['file']['enabled'] = False
    return config


@pytest.fixture
def config(base_config):
    """Fresh copy of the bundled configuration (file logging off)."""
    return copy.deepcopy(base_config)
