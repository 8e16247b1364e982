"""Shared fixtures for the iCOW engine tests."""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from icow_engine.core.parameters import CityParameters


@pytest.fixture
def params():
    """Reference city with the default parameter set."""
    return CityParameters()


@pytest.fixture
def unit_ratio_params():
    """Reference city with protected/unprotected value ratios set to 1."""
    return CityParameters(r_prot=1.0, r_unprot=1.0)
