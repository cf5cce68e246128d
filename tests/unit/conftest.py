from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def webapp_context():
    return {
        "project_name": "SimpleForm",
        "handler_path": str(ROOT / "functions" / "survey"),
        "frontend_dist_path": str(ROOT / "frontend" / "dist"),
        "lambda_memory": 256,
        "lambda_timeout_in_seconds": 5,
        "log_output_format": "json",
        "waf_log_retention_days": 30,
        "log_removal_policy": "destroy",
    }
