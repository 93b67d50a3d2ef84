import pytest
from unittest.mock import patch
from supportwise import messages
from supportwise.cli import main_workflow, PROMPT
from supportwise.config import DEFAULT_CATALOG_PATH, Settings


def cli_settings(**overrides):
    values = dict(
        catalog_path=DEFAULT_CATALOG_PATH,
        visitor_flag_path=None,
        log_level="INFO",
        simulate_typing=False,
        retry_max_attempts=3,
        retry_delay_ms=0,
        random_seed=3,
    )
    values.update(overrides)
    return Settings(**values)

@pytest.mark.asyncio
@patch('builtins.input', side_effect=['What is EVA?', '', 'reset', 'exit'])
async def test_cli_basic_flow(mock_input, capsys):
    await main_workflow(cli_settings())

    mock_input.assert_any_call(PROMPT)
    assert mock_input.call_count == 4

    output = capsys.readouterr().out
    assert "Bot: EVA (Eligibility Verification Agent) is our AI solution" in output
    assert "Please enter a message." in output
    assert any(farewell in output for farewell in messages.FAREWELL_MESSAGES)

@pytest.mark.asyncio
@patch('builtins.input', side_effect=['How much does Thoughtful AI cost?', 'exit'])
async def test_cli_renders_links_as_plain_text(mock_input, capsys):
    await main_workflow(cli_settings())
    output = capsys.readouterr().out
    assert "<a href" not in output
    assert "sales@thoughtful.ai" in output

@pytest.mark.asyncio
@patch('builtins.input', side_effect=EOFError)
async def test_cli_exits_on_end_of_input(mock_input, capsys):
    await main_workflow(cli_settings())
    mock_input.assert_called_once_with(PROMPT)

@pytest.mark.asyncio
@patch('builtins.input', side_effect=['exit'])
async def test_cli_empty_catalog_still_runs(mock_input, tmp_path):
    await main_workflow(cli_settings(catalog_path=tmp_path / "missing.json"))
    mock_input.assert_called_once_with(PROMPT)
