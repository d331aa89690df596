"""
Unit Tests for deployment plans and configuration loading
"""

from pathlib import Path

import pytest

from deployer.config import load_config
from deployer.exceptions import ConfigurationError, PlanNotFoundError
from deployer.models import DeploymentTarget
from deployer.plans import available_plans, load_plan, parse_contract_list

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "deploy_config.json"


@pytest.fixture
def config():
    return load_config(str(CONFIG_PATH))


class TestShippedPlans:

    def test_plans_available(self, config):
        assert available_plans(config) == ["factory", "suite"]

    def test_suite_order(self, config):
        targets = load_plan(config, "suite")

        assert [t.name for t in targets] == [
            "Fusion", "FusionProxyFactory", "OpenBatchExecutor", "OpenBatchExecutorNoFailure"
        ]
        assert all(t.constructor_args == () for t in targets)

    def test_factory_constructor_args(self, config):
        (target,) = load_plan(config, "factory")

        assert target.name == "FusionProxyFactory"
        assert target.constructor_args == (
            "0x40C92d2E370b3d3944fDd90c922a407F02D286d1",
            "0x3411eE3ACc6eC027bff5C60D5463f1f0BB9C5f2e",
            10005,
            "0x93BAD53DDfB6132b0aC8E37f6029163E63372cEE",
            10004,
        )

    def test_compiler_settings(self, config):
        solidity = config["solidity"]

        assert solidity["version"] == "0.8.24"
        assert solidity["settings"]["optimizer"] == {
            "enabled": True,
            "runs": 800,
            "details": {"yulDetails": {"optimizerSteps": "u"}}
        }
        assert solidity["settings"]["evmVersion"] == "paris"
        assert solidity["settings"]["viaIR"] is True

    def test_default_margin_is_twenty_percent(self, config):
        assert config["gas_settings"]["safety_margin_percent"] == 20


class TestPlanErrors:

    def test_unknown_plan(self, config):
        with pytest.raises(PlanNotFoundError, match="factory, suite"):
            load_plan(config, "legacy")

    def test_empty_plan(self):
        with pytest.raises(ConfigurationError):
            load_plan({"plans": {"empty": {"contracts": []}}}, "empty")

    def test_entry_without_name(self):
        with pytest.raises(ConfigurationError):
            load_plan({"plans": {"bad": {"contracts": [{"args": [1]}]}}}, "bad")

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "deploy_config.json"))

    def test_invalid_config_json(self, tmp_path):
        path = tmp_path / "deploy_config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            load_config(str(path))


class TestContractList:

    def test_parse(self):
        assert parse_contract_list("Fusion, OpenBatchExecutor,") == [
            DeploymentTarget("Fusion"),
            DeploymentTarget("OpenBatchExecutor"),
        ]

    def test_empty(self):
        with pytest.raises(ConfigurationError):
            parse_contract_list(" , ")
