"""Rule and model modules import on their own, without app.main loaded first."""

import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.mark.parametrize(
    "module",
    [
        "app.modules.finance.derivation",
        "app.modules.finance.description",
        "app.modules.inventory.models",
        "app.modules.orders.status",
        "app.modules.shipping.message",
        "app.core.db.models",
    ],
)
def test_module_imports_in_a_fresh_interpreter(module):
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=REPO_ROOT,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr


def test_registry_holds_every_table():
    from app.core.db.models import Base

    assert set(Base.metadata.tables) == {
        "profiles",
        "settings",
        "orders",
        "car_inventory",
        "financial_transactions",
        "shipping_forms",
    }
