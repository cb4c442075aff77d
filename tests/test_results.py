"""Tests for result aggregation and charts."""

import pytest

from event_pingpong.core.models import Exchange, PingPongConfig, RunResult
from event_pingpong.results.aggregator import ResultAggregator
from event_pingpong.results.charts import generate_round_trip_chart


@pytest.fixture
def result():
    exchanges = [
        Exchange(
            sequence_number=n,
            payload=f"{n} ",
            publish_timestamp=n * 0.25,
            echo_timestamp=n * 0.25 + 0.1,
            stale_echoes=1 if n == 3 else 0,
        )
        for n in range(1, 11)
    ]
    return RunResult.from_exchanges(
        test_name="02_ping_pong_old_api",
        device_id="dev0",
        out_channel="devin1",
        in_channel="devout1",
        config=PingPongConfig(event_count=10, event_size=32),
        exchanges=exchanges,
        elapsed_seconds=2.34,
    )


class TestResultAggregator:
    def test_dataframe_row_per_result(self, result):
        aggregator = ResultAggregator()
        aggregator.add_results([result, result])

        df = aggregator.to_dataframe()

        assert len(df) == 2
        assert list(df["Test"]) == ["02_ping_pong_old_api"] * 2
        assert df["Events"].iloc[0] == 10
        assert df["Stale"].iloc[0] == 1
        assert df["Elapsed_s"].iloc[0] == "2.3"

    def test_tsv_export(self, result, tmp_path):
        aggregator = ResultAggregator()
        aggregator.add_result(result)
        path = tmp_path / "results.tsv"

        aggregator.to_tsv(str(path))

        lines = path.read_text().splitlines()
        assert lines[0].split("\t")[0] == "Test"
        assert lines[1].startswith("02_ping_pong_old_api\tdev0\tdevin1\tdevout1\t10")
        assert aggregator.get_tsv_string().splitlines() == lines

    def test_exchanges_dataframe(self, result):
        df = ResultAggregator().exchanges_dataframe(result)

        assert list(df["sequence_number"]) == list(range(1, 11))
        assert df["round_trip_ms"].iloc[0] == pytest.approx(100)

    def test_single_result_summary(self, result, capsys):
        ResultAggregator().print_single_result(result)

        output = capsys.readouterr().out
        assert "Events sent/received: 10" in output
        assert "Time elapsed: 2.3s" in output

    def test_empty_summary_table(self, capsys):
        ResultAggregator().print_summary_table()

        assert "No results to display." in capsys.readouterr().out

    def test_clear(self, result):
        aggregator = ResultAggregator()
        aggregator.add_result(result)
        aggregator.clear()

        assert aggregator.results == []


class TestCharts:
    def test_chart_is_saved(self, result, tmp_path):
        path = tmp_path / "rtt.png"

        saved = generate_round_trip_chart(result, output_path=str(path))

        assert saved == str(path)
        assert path.stat().st_size > 0

    def test_nothing_to_chart(self, result):
        result.exchanges = []

        assert generate_round_trip_chart(result) is None
