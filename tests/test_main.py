"""
Tests for KLADR command line client (main.py).
"""

import json
from pathlib import Path
from typing import List
from unittest.mock import patch
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest

import main
from lib.kladr import KladrClient

SAMPLE_RESPONSE = {"result": [{"id": "3800000300000", "name": "Ангарск", "contentType": "city"}]}


@pytest.fixture
def requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mockClientFactory(requests):
    """Patch KladrClient in main to use MockTransport, dood!"""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=SAMPLE_RESPONSE)

    def factory(token, config):
        return KladrClient(token, config, transport=httpx.MockTransport(handler))

    with patch("main.KladrClient", side_effect=factory) as mockClass:
        yield mockClass


def lastParams(requests: List[httpx.Request]) -> dict:
    return dict(parse_qsl(urlsplit(str(requests[-1].url)).query))


def testParseStringCommand():
    args = main.parse_arguments(["string", "Москва", "--city-id", "7700000000000", "--with-parent", "--limit", "3"])

    assert args.command == "string"
    assert args.query == "Москва"
    assert args.limit == 3
    assert main.buildOptions(args) == {"withParent": True, "cityId": "7700000000000"}


def testParseFieldCommand():
    args = main.parse_arguments(["field", "Тверская", "--content-type", "street", "--type-code", "5", "--zip", "101000"])

    assert main.buildOptions(args) == {"contentType": "street", "typeCode": 5, "zip": "101000"}


def testCommandIsRequired():
    with pytest.raises(SystemExit):
        main.parse_arguments([])


def testStringSearch(tmp_path: Path, mockClientFactory, requests, capsys):
    exitCode = main.main(["-c", str(tmp_path / "missing.toml"), "string", " Ангарск ", "--with-parent"])

    assert exitCode == 0
    assert json.loads(capsys.readouterr().out) == SAMPLE_RESPONSE
    mockClientFactory.assert_called_once_with(None, {})
    params = lastParams(requests)
    assert params["query"] == "Ангарск"
    assert params["oneString"] == "1"
    assert params["withParent"] == "1"


def testFieldSearchWithConfig(tmp_path: Path, mockClientFactory, requests, capsys):
    configPath = tmp_path / "config.toml"
    configPath.write_text('[kladr]\ntoken = "from_config"\nurl = "https://host/api.php"\n')

    exitCode = main.main(["-c", str(configPath), "field", "Анга", "--content-type", "city", "--type-code", "3"])

    assert exitCode == 0
    mockClientFactory.assert_called_once_with("from_config", {"url": "https://host/api.php"})
    assert str(requests[-1].url).startswith("https://host/api.php?")
    params = lastParams(requests)
    assert params["token"] == "from_config"
    assert params["typeCode"] == "3"
    assert params["contentType"] == "city"


def testTokenArgumentOverridesConfig(tmp_path: Path, mockClientFactory, requests):
    configPath = tmp_path / "config.toml"
    configPath.write_text('[kladr]\ntoken = "from_config"\n')

    main.main(["-c", str(configPath), "--token", "from_cli", "string", "Москва"])

    assert lastParams(requests)["token"] == "from_cli"


def testValidationErrorExitCode(tmp_path: Path, mockClientFactory, requests):
    exitCode = main.main(["-c", str(tmp_path / "missing.toml"), "field", "Тверская"])

    assert exitCode == 1
    assert requests == []


def testPrintConfig(tmp_path: Path, capsys):
    configPath = tmp_path / "config.toml"
    configPath.write_text('[kladr]\ntimeout = 3\n')

    exitCode = main.main(["-c", str(configPath), "--print-config"])

    assert exitCode == 0
    assert json.loads(capsys.readouterr().out) == {"kladr": {"timeout": 3}}
