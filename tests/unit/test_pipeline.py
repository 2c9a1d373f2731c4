from concurrent.futures import ThreadPoolExecutor

import pytest

from mare.core.chain import AttributeMapping, build_chain
from mare.core.exceptions import ChainStepError, ConfigError, RangeError
from mare.core.pipeline import PipelineInvoker, PipelineResult


@pytest.fixture()
def invoker(metaverse, diagnostics):
    return PipelineInvoker(lookup=metaverse, diagnostics=diagnostics)


class TestPipelineResult:
    def test_success(self):
        result = PipelineResult(value="x")
        assert result.ok
        assert result.unwrap() == "x"
        assert result.to_dict() == {"ok": True, "value": "x"}

    def test_failure(self):
        error = ChainStepError(2, "SetBit", {"BitPosition": 40, "Value": True}, RangeError("out of range"))
        result = PipelineResult(error=error)
        assert not result.ok
        with pytest.raises(ChainStepError):
            result.unwrap()
        assert result.to_dict() == {
            "ok": False,
            "error": "RangeError",
            "detail": "out of range",
            "position": 2,
            "variant": "SetBit",
            "parameters": {"BitPosition": 40, "Value": True},
        }


class TestRun:
    def test_descriptor_list(self, invoker):
        result = invoker.run([{"type": "ToUpper"}, {"type": "Trim"}], " alice ")
        assert result.ok
        assert result.value == "ALICE"

    def test_lookup_reaches_collaborator(self, invoker):
        chain = build_chain([{
            "type": "LookupMVValue",
            "LookupAttributeName": "employeeID",
            "ExtractValueFromAttribute": "[DN]",
            "MAName": "AD",
        }])
        assert invoker.run(chain, "1001").value == "CN=Alice,OU=Users,DC=corp,DC=example"

    def test_step_failure_returned(self, invoker):
        result = invoker.run([{"type": "SetBit", "BitPosition": 32}], "0")
        assert result.error.position == 0
        assert isinstance(result.error.cause, RangeError)

    def test_config_error_raised_before_any_step(self, invoker, diagnostics):
        with pytest.raises(ConfigError):
            invoker.run([{"type": "ToUpper"}, {"type": "Unknown"}], "a")
        assert diagnostics.records == []

    def test_absent_value(self, invoker):
        assert invoker.run([{"type": "ToUpper"}], None).value is None

    def test_lookup_max_results_forwarded(self, metaverse):
        invoker = PipelineInvoker(lookup=metaverse, lookup_max_results=3)
        invoker.run([{
            "type": "LookupMVValue",
            "LookupAttributeName": "employeeID",
            "ExtractValueFromAttribute": "accountName",
        }], "1001")
        assert metaverse.calls == [("employeeID", "1001", 3)]

    def test_invalid_max_results(self):
        with pytest.raises(ConfigError):
            PipelineInvoker(lookup_max_results=0)

    def test_each_run_gets_fresh_context(self, invoker):
        assert invoker.new_context() is not invoker.new_context()

    def test_concurrent_runs_share_chain(self):
        invoker = PipelineInvoker()
        chain = build_chain([{"type": "PadLeft", "TotalWidth": 5, "PaddingChar": "0"}])
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda n: invoker.run(chain, str(n)).value, range(200)))
        assert results == [str(n).zfill(5) for n in range(200)]


class TestRunMapping:
    def test_reads_source_attribute(self, invoker):
        mapping = AttributeMapping("upn", "sAMAccountName", "userPrincipalName", build_chain([{"type": "ToLower"}]))
        assert invoker.run_mapping(mapping, {"sAMAccountName": "ALICE"}).value == "alice"

    def test_missing_source_is_absent(self, invoker):
        mapping = AttributeMapping("upn", "sAMAccountName", "userPrincipalName", build_chain([{"type": "ToLower"}]))
        result = invoker.run_mapping(mapping, {})
        assert result.ok
        assert result.value is None
