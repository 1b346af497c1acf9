import importlib.util
import json
from pathlib import Path


SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "snapshot_report.py"
_loader_spec = importlib.util.spec_from_file_location("snapshot_report", SCRIPT)
snapshot_report = importlib.util.module_from_spec(_loader_spec)
_loader_spec.loader.exec_module(snapshot_report)


def test_report_from_envelope(tmp_path, capsys):
    dump = tmp_path / "labor.json"
    dump.write_text(
        json.dumps(
            {
                "success": True,
                "data": [
                    {"requestNo": 1, "requestStatus": "OPEN", "details": []},
                    {"requestNo": 2, "requestStatus": "CANCELLED", "details": [{"sequenceNo": 1, "jobTitleEn": "Welder"}]},
                ],
            }
        ),
        encoding="utf-8",
    )
    assert snapshot_report.main(["LABOR", str(dump), "--status", "rejected"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [(r["request_id"], r["specialization"]) for r in rows] == [(2, "Welder")]


def test_report_rejects_malformed_payload(tmp_path, capsys):
    dump = tmp_path / "loans.json"
    dump.write_text(json.dumps([{"transStatus": "A"}]), encoding="utf-8")
    assert snapshot_report.main(["LOAN", str(dump)]) == 1
    assert "Malformed LOAN payload" in capsys.readouterr().err
