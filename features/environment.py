"""
Behave environment configuration for NameCom Manager integration tests.
"""

import logging
import shutil
import tempfile
from pathlib import Path

import yaml

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.base_dir = Path(__file__).parent.parent
    context.test_zone = "example.com"

    context.test_config = {
        "dns_providers": {
            "mock": {"domains": [context.test_zone]},
        },
        "default_provider": "mock",
        "logging": {
            "level": "DEBUG",
            "file": "test_namecom_manager.log",
        },
    }

    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Set up each test scenario."""
    context.scenario_name = scenario.name
    context.test_data_dir = Path(tempfile.mkdtemp(prefix="namecom-"))
    context.resources_file = context.test_data_dir / "resources.yaml"
    context.state_file = context.test_data_dir / "state.yaml"
    context.config_file = context.test_data_dir / "config.yaml"
    context.resources = {"resources": {}}
    context.error = None

    with open(context.config_file, "w") as f:
        yaml.dump(context.test_config, f)

    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Clean up after each test scenario."""
    try:
        shutil.rmtree(context.test_data_dir)
    except OSError as e:
        logger.warning(f"Failed to cleanup test data: {e}")

    logger.info(f"Completed scenario: {scenario.name}")
