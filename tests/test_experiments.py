import csv

import matplotlib
matplotlib.use("Agg")

import experiments


def test_run_one_english_like():
	text = experiments.gen_english_like(2000, seed=1)
	row = experiments.run_one(text)
	assert row.correctness_ok == 1
	assert row.size_chars == 2000
	assert row.encoded_bits < 8 * 2000
	assert row.entropy <= row.avg_code_length < row.entropy + 1
	assert 0 < row.efficiency <= 1 + 1e-9


def test_run_one_single_symbol():
	row = experiments.run_one(experiments.gen_single_symbol(500))
	assert row.correctness_ok == 1
	assert row.unique_symbols == 1
	assert row.avg_code_length == 1.0
	assert row.encoded_bits == 500
	assert row.efficiency == 0.0


def test_generators_are_seeded():
	assert experiments.gen_zipf_like(300, seed=5) == experiments.gen_zipf_like(300, seed=5)
	assert len(set(experiments.gen_uniform(1000, alphabet=4, seed=2))) <= 4


def test_generate_dataset_fallback():
	name, text = experiments.generate_dataset("nope", 100, seed=0)
	assert name == "nope_fallback_uniform"
	assert len(text) == 100
	name, _ = experiments.generate_dataset("repetitive99", 100, seed=0)
	assert name == "repetitive99"


def test_main_writes_outputs(tmp_path, capsys):
	rc = experiments.main([
		"--outdir", str(tmp_path), "--runs", "1",
		"--exp1_size_kb", "1",
		"--exp2_min_kb", "1", "--exp2_max_kb", "2",
		"--exp3_size_kb", "1",
	])
	assert rc == 0
	with (tmp_path / "metrics.csv").open(newline="", encoding="utf-8") as f:
		rows = list(csv.DictReader(f))
	# 4 distributions + 2 generators x 2 sizes + 8 alphabets
	assert len(rows) == 16
	assert all(r["correctness_ok"] == "1" for r in rows)

	with (tmp_path / "summary.csv").open(newline="", encoding="utf-8") as f:
		summary = list(csv.DictReader(f))
	assert all(float(r["correctness_ok_rate"]) == 1.0 for r in summary)

	assert (tmp_path / "exp1_code_length.png").exists()
	assert (tmp_path / "exp2_time_uniform.png").exists()
	assert (tmp_path / "exp3_code_length.png").exists()
	assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
