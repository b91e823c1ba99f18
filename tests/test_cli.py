import json


def test_create_user_seed_and_stats(app):
    runner = app.test_cli_runner()

    result = runner.invoke(
        args=["blackroc-create-user", "--email", "owner@example.com", "--password", "secret-pass"]
    )
    assert result.exit_code == 0, result.output
    assert "Created user owner@example.com" in result.output

    result = runner.invoke(args=["blackroc-seed-demo", "--email", "owner@example.com"])
    assert result.exit_code == 0, result.output
    assert "6 quotes" in result.output

    result = runner.invoke(args=["blackroc-stats", "--email", "owner@example.com"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["stats"]["outstanding_balance"] == "22950.50"
    assert payload["degraded"] is False


def test_create_user_rejects_short_password(app):
    runner = app.test_cli_runner()

    result = runner.invoke(
        args=["blackroc-create-user", "--email", "owner@example.com", "--password", "123"]
    )

    assert result.exit_code != 0
    assert "at least" in result.output


def test_commands_require_known_account(app):
    runner = app.test_cli_runner()

    for command in ("blackroc-seed-demo", "blackroc-stats"):
        result = runner.invoke(args=[command, "--email", "ghost@example.com"])
        assert result.exit_code != 0
        assert "No account for ghost@example.com" in result.output
