"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib
import sys
from pathlib import Path

import pytest


# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

PACKAGES = ("handlers", "services", "models", "repositories", "utils", "config")


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize("module_name, entrypoint", [
        ("handlers.main", "lambda_handler"),
        ("handlers.health_check", "lambda_handler"),
        ("handlers.tickets", "issue_handler"),
        ("handlers.tickets", "regenerate_handler"),
        ("handlers.tickets", "invalidate_handler"),
        ("handlers.tickets", "status_handler"),
        ("handlers.tickets", "code_handler"),
    ])
    def test_handler_import(self, module_name: str, entrypoint: str):
        """Each handler module should import and expose its entrypoints."""
        try:
            module = importlib.import_module(module_name)
            assert hasattr(module, entrypoint), f"{module_name} missing {entrypoint}"
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestModuleImports:
    """Verify service, model, repository, util and config modules import."""

    @pytest.mark.parametrize("module_name", [
        "services.payload_composer",
        "services.code_encoder",
        "services.code_renderer",
        "services.expiry_clock",
        "services.ticket_controller",
        "services.countdown_ticker",
        "services.balance_service",
        "services.ticket_registry",
        "models.ticket",
        "models.response",
        "repositories.wallet_repo",
        "utils.logging_config",
        "utils.error_handling",
        "utils.session_store",
        "utils.validators",
        "config.settings",
    ])
    def test_module_import(self, module_name: str):
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestNoSrcPrefix:
    """Ensure no modules use 'from src.' imports (breaks in Lambda)."""

    @pytest.mark.parametrize("package", PACKAGES)
    def test_no_src_prefix(self, package: str):
        for py_file in (SRC_PATH / package).glob("*.py"):
            content = py_file.read_text()
            assert "from src." not in content, f"{py_file.name} contains 'from src.' import"
            assert "import src." not in content, f"{py_file.name} contains 'import src.' import"
