"""自检运行器测试"""

import logging

from valued_completion.selfcheck import main, run_self_check


class TestSelfCheck:
    def test_all_scenarios_pass(self, small_config):
        verdict = run_self_check(small_config)
        failed = [r["test"] for r in verdict["results"] if not r["passed"]]
        assert failed == []
        assert verdict["all_passed"] is True
        assert verdict["total_tests"] == 7

    def test_digest_is_deterministic(self, small_config):
        a = run_self_check(small_config)
        b = run_self_check(small_config)
        assert a["digest"] == b["digest"]
        assert len(a["digest"]) == 64

    def test_main_exit_code(self, caplog):
        with caplog.at_level(logging.INFO, logger="valued_completion.selfcheck"):
            assert main() == 0
        assert "self-test: 7/7 passed" in caplog.text
