"""Shared test fixtures for all test modules."""

import json

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep logs and user config of the test run inside a temp directory."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("TERRACONF_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("TERRACONF_LOG_LEVEL", raising=False)
    monkeypatch.delenv("TERRACONF_RENDER_STRICT", raising=False)
    monkeypatch.delenv("TERRACONF_RENDER_SKIP_EMPTY", raising=False)


@pytest.fixture
def state_data():
    """A version 3 state document with two resources in the root module."""
    return {
        "version": 3,
        "terraform_version": "0.11.14",
        "serial": 7,
        "lineage": "5e1f0b8c-7d8f-4a5e-9d57-0a5b0d0b6c2e",
        "modules": [
            {
                "path": ["root"],
                "outputs": {},
                "resources": {
                    "aws_security_group.web": {
                        "type": "aws_security_group",
                        "depends_on": [],
                        "primary": {
                            "id": "sg-0a1b2c",
                            "attributes": {
                                "id": "sg-0a1b2c",
                                "name": "web",
                                "revoke_rules_on_delete": "false",
                            },
                            "meta": {},
                            "tainted": False,
                        },
                        "deposed": [],
                        "provider": "provider.aws",
                    },
                    "aws_instance.web": {
                        "type": "aws_instance",
                        "depends_on": ["aws_security_group.web", "aws_subnet.a"],
                        "primary": {
                            "id": "i-0abc.123",
                            "attributes": {
                                "id": "i-0abc.123",
                                "instance_type": "t2.micro",
                                "ami": "ami-12345678",
                                "tags.%": "1",
                                "tags.Name": "web",
                                "security_groups.#": "2",
                                "security_groups.0": "default",
                                "security_groups.1": "web",
                            },
                            "meta": {"schema_version": "1"},
                            "tainted": False,
                        },
                        "deposed": [],
                        "provider": "provider.aws",
                    },
                },
                "depends_on": [],
            }
        ],
    }


@pytest.fixture
def state_file(tmp_path, state_data):
    """The state_data document written to terraform.tfstate."""
    path = tmp_path / "terraform.tfstate"
    path.write_text(json.dumps(state_data, indent=2))
    return path
