import json

from yq_provider.result import EvaluationResult, Incident, dedupe_incidents, format_summary_table


def _incident(uri="file:///a.yaml", line=10, tag="latest"):
    return Incident(file_uri=uri, line_number=line, variables={"imageTag": tag})


def test_dedupe_collapses_identical_incidents():
    incidents = [_incident(), _incident(), _incident(line=11)]

    unique = dedupe_incidents(incidents)

    assert len(unique) == 2
    assert unique[0] is incidents[0]


def test_dedupe_is_idempotent():
    incidents = [_incident(), _incident(uri="file:///b.yaml"), _incident()]

    once = dedupe_incidents(incidents)
    twice = dedupe_incidents(once)

    assert [item.key() for item in once] == [item.key() for item in twice]


def test_key_ignores_variable_order():
    first = Incident("file:///a.yaml", 1, {"imageTag": "latest", "name": "web"})
    second = Incident("file:///a.yaml", 1, {"name": "web", "imageTag": "latest"})

    assert first.key() == second.key()


def test_result_without_incidents_is_no_match():
    result = EvaluationResult.from_incidents([])

    assert result.matched is False
    assert result.incidents == []
    assert result.exit_code() == 0


def test_result_is_independent_of_arrival_order():
    incidents = [_incident(uri="file:///b.yaml"), _incident(), _incident(line=3)]

    forward = EvaluationResult.from_incidents(incidents)
    backward = EvaluationResult.from_incidents(list(reversed(incidents)))

    assert forward.to_dict() == backward.to_dict()
    assert forward.matched is True
    assert forward.exit_code() == 1


def test_to_dict_is_json_serializable():
    result = EvaluationResult.from_incidents([_incident()])

    data = json.loads(json.dumps(result.to_dict()))

    assert data == {
        "matched": True,
        "incidents": [
            {"file_uri": "file:///a.yaml", "line_number": 10, "variables": {"imageTag": "latest"}}
        ],
    }


def test_summary_table_lists_incidents():
    table = format_summary_table(EvaluationResult.from_incidents([_incident()]))

    assert "MATCHED" in table
    assert "[latest] file:///a.yaml:10" in table
