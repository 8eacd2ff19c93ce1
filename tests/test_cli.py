import json

from typer.testing import CliRunner

from momo_assist.cli import app

runner = CliRunner()

MERCHANT_SMS = (
    "TxId: 14247881483. Your payment of 1,000 RWF to Chez Lando 774455 has been "
    "completed at 2024-01-01 10:00:00. Your new balance: 38,533 RWF. Fee was 0 RWF."
)


def test_parse_argument_prints_json():
    result = runner.invoke(app, ["parse", MERCHANT_SMS])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "amount": 1000,
        "counterparty_name": "Chez Lando",
        "counterparty_number": "774455",
        "kind": "merchant_payment",
    }


def test_parse_reads_stdin():
    result = runner.invoke(app, ["parse"], input=MERCHANT_SMS)
    assert result.exit_code == 0
    assert json.loads(result.stdout)["amount"] == 1000


def test_parse_no_match_exits_nonzero():
    result = runner.invoke(app, ["parse", "hello there"])
    assert result.exit_code == 1


def test_pay_remembers_receiver(_isolate_store):
    result = runner.invoke(
        app, ["pay", "--name", "Alice", "--number", "+250 788 123 456", "--amount", "1,500"]
    )
    assert result.exit_code == 0
    assert "transfer 1,500 RWF to Alice (0788123456)" in result.stdout
    assert _isolate_store.exists()

    recent = runner.invoke(app, ["recent"])
    assert recent.exit_code == 0
    assert recent.stdout.strip() == "1\tAlice\t0788123456"

    found = runner.invoke(app, ["search", "078"])
    assert found.stdout.strip() == "1\tAlice\t0788123456"


def test_pay_rejects_invalid_number():
    result = runner.invoke(app, ["pay", "--name", "Alice", "--number", "12", "--amount", "100"])
    assert result.exit_code == 1


def test_search_short_query_prints_nothing():
    result = runner.invoke(app, ["search", "a"])
    assert result.exit_code == 0
    assert result.stdout == ""


def test_corrupt_store_is_reset(_isolate_store):
    _isolate_store.parent.mkdir(parents=True, exist_ok=True)
    _isolate_store.write_text("{broken", encoding="utf-8")
    result = runner.invoke(app, ["recent"])
    assert result.exit_code == 0
    assert json.loads(_isolate_store.read_text(encoding="utf-8")) == {"receivers": [], "lastId": 0}
