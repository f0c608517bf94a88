import pytest

from src.cli.flags import FlagSpec
from src.cli.help import exit_with_help, gen_help_message, options_block, wants_help


def test_wants_help_is_a_substring_match() -> None:
    assert wants_help(["--help"])
    assert wants_help(["13", "-e", "helpdesk"])
    assert wants_help(["help"])
    assert not wants_help(["13", "-n", "5"])
    assert not wants_help([])
    assert not wants_help(["HELP"])


def test_gen_help_message_section_order() -> None:
    text = gen_help_message("describe me", "    usage line", "    -x  an option", "    # example")
    assert text.startswith("describe me\n")
    usage = text.index("Usage:")
    options = text.index("Options:")
    examples = text.index("Examples:")
    assert usage < options < examples
    # --help is injected as the first option
    assert options < text.index("--help") < text.index("-x  an option")
    assert "# example" in text[examples:]


def test_options_block_shows_short_and_default() -> None:
    block = options_block((
        FlagSpec("eth", "--eth", "-e", default=50, help="Amount of ETH."),
        FlagSpec("auto_accept", "-y", kind="boolean", default=False, help="Auto-accept."),
    ))
    lines = block.splitlines()
    assert lines[0].strip().startswith("-e, --eth")
    assert "(default: 50)" in lines[0]
    assert lines[1].strip().startswith("-y")
    assert "default" not in lines[1]


def test_exit_with_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        exit_with_help("the help", 1, error="boom")
    assert exc.value.code == 1
    out, err = capsys.readouterr()
    assert "the help" in out
    assert "boom" in err
