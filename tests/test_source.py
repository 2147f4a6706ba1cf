import json

from miniscan.source import (
    ParsedMultiFile,
    PlainText,
    format_abi,
    normalize_source,
    parse_source,
    strip_file_header,
)


def _bundle(sources):
    """Wrap a standard-JSON input the way explorers do: one extra pair of braces."""
    return "{" + json.dumps({"language": "Solidity", "sources": sources}) + "}"


def test_plain_source_is_unchanged():
    assert normalize_source("contract A{}") == "contract A{}"
    assert isinstance(parse_source("contract A{}"), PlainText)


def test_empty_and_tiny_inputs_are_plain():
    assert normalize_source("") == ""
    assert normalize_source("{") == "{"


def test_single_file_bundle_keeps_its_header():
    raw = _bundle({"a.sol": {"content": "pragma solidity ^0.8.0;\nimport X;\ncontract A{}"}})
    assert normalize_source(raw) == "\npragma solidity ^0.8.0;\nimport X;\ncontract A{}"


def test_multi_file_bundle_strips_headers_after_first_file():
    raw = _bundle(
        {
            "contracts/A.sol": {"content": "pragma solidity ^0.8.0;\nimport \"./B.sol\";\ncontract A is B {}"},
            "contracts/B.sol": {"content": "pragma solidity ^0.8.0;\nimport \"./C.sol\";\ncontract B {}"},
            "contracts/C.sol": {"content": "// SPDX-License-Identifier: MIT\npragma solidity ^0.8.0;\ncontract C {}"},
        }
    )
    assert normalize_source(raw) == (
        "\npragma solidity ^0.8.0;\nimport \"./B.sol\";\ncontract A is B {}"
        "\ncontract B {}"
        "\n// SPDX-License-Identifier: MIT\ncontract C {}"
    )


def test_parse_source_keeps_document_order():
    raw = _bundle({"z.sol": {"content": "z"}, "a.sol": {"content": "a"}})
    parsed = parse_source(raw)
    assert isinstance(parsed, ParsedMultiFile)
    assert [path for path, _ in parsed.files] == ["z.sol", "a.sol"]


def test_unwrapped_json_is_treated_as_plain_text():
    raw = json.dumps({"sources": {"a.sol": {"content": "contract A{}"}}})
    assert normalize_source(raw) == raw


def test_wrapped_json_without_sources_is_plain_text():
    raw = "{" + json.dumps({"language": "Vyper"}) + "}"
    assert isinstance(parse_source(raw), PlainText)


def test_indented_header_lines_are_kept():
    assert strip_file_header("  import X;\nimport Y;\npragma solidity 0.8.0;\ncontract C {}") == (
        "  import X;\ncontract C {}"
    )


def test_format_abi_pretty_prints_json():
    formatted = format_abi('[{"type":"function","name":"f","inputs":[]}]')
    assert json.loads(formatted) == [{"type": "function", "name": "f", "inputs": []}]
    assert formatted.startswith("[\n  {\n")
    assert ",\n]" not in formatted


def test_format_abi_passes_non_json_through():
    assert format_abi("Contract source code not verified") == "Contract source code not verified"
