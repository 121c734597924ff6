from evaluation import evaluation


SAMPLE_OUTPUT = """
============================= test session starts ==============================
tests/test_bits.py::test_pack_whole_byte PASSED                          [ 10%]
tests/test_core.py::test_single_symbol_tree FAILED                       [ 20%]
tests/test_service.py::test_roundtrip_all_bytes_once[codes] SKIPPED      [ 30%]
tests/test_cli.py::test_info ERROR                                       [ 40%]
=========================== short test summary info ============================
"""


def test_parse_pytest_verbose_output():
	tests = evaluation.parse_pytest_verbose_output(SAMPLE_OUTPUT)
	assert [t["outcome"] for t in tests] == ["passed", "failed", "skipped", "error"]
	assert tests[0]["nodeid"] == "tests/test_bits.py::test_pack_whole_byte"
	assert tests[2]["name"] == "test_roundtrip_all_bytes_once[codes]"


def test_summarize():
	tests = evaluation.parse_pytest_verbose_output(SAMPLE_OUTPUT)
	summary = evaluation.summarize(tests)
	assert summary == {"total": 4, "passed": 1, "failed": 1, "error": 1, "skipped": 1}


def test_measure_corpus():
	corpus = {"empty": b"", "text": b"abracadabra" * 50}
	results = evaluation.measure_corpus(corpus)
	assert results["empty"]["ratio"] is None
	assert all(r["round_trip"] for r in results.values())
	assert results["text"]["compressed_size"] < results["text"]["original_size"]


def test_main_writes_report(tmp_path):
	output = tmp_path / "report.json"
	assert evaluation.main(["--skip-tests", "--output", str(output)]) == 0
	assert output.exists()
