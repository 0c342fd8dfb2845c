import io

import pytest

from boundkmeans.cli import get_distortion, load_dataset, main
from boundkmeans.dataset import Dataset

POINTS = "4 2\n0 0\n0 1\n10 10\n10 11\n"


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "points.txt"
    path.write_text(POINTS)
    return path


def _run(tmp_path, capsys, text):
    cmd = tmp_path / "commands.txt"
    cmd.write_text(text)
    assert main([str(cmd)]) == 0
    return capsys.readouterr()


def test_load_dataset_reads_values(data_file):
    x = load_dataset(str(data_file))
    assert (x.n, x.d) == (4, 2)
    assert x.row(2) == [10.0, 10.0]
    assert x.data == [0.0, 0.0, 0.0, 1.0, 10.0, 10.0, 10.0, 11.0]


def test_load_dataset_too_few_values(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("3 2\n1 2 3\n")
    with pytest.raises(ValueError):
        load_dataset(str(path))


def test_get_distortion_worked_example():
    x = Dataset.from_rows([[0.0, 0.0], [2.0, 0.0]])
    centers = Dataset.from_rows([[1.0, 0.0]])
    assert get_distortion(x, [0, 0], centers) == pytest.approx(1.0)


def test_get_distortion_zero_at_own_points():
    x = Dataset.from_rows([[1.0, 2.0], [3.0, 4.0]])
    assert get_distortion(x, [0, 1], x.copy()) == 0.0


def test_get_distortion_empty_raises():
    with pytest.raises(ValueError):
        get_distortion(Dataset(0, 2), [], Dataset(1, 2))


def test_header_and_load_message(tmp_path, capsys, data_file):
    result = _run(tmp_path, capsys, f"dataset {data_file}\n")
    lines = result.out.splitlines()
    assert "algorithm" in lines[0] and "iters" in lines[0]
    assert lines[1] == f"loaded dataset {data_file}: n = 4, d = 2"


def test_missing_data_file_reported(tmp_path, capsys):
    result = _run(tmp_path, capsys, f"dataset {tmp_path / 'nope.txt'}\n")
    assert "Unable to open data file" in result.err


def test_kernel_run_separates_clusters(tmp_path, capsys, data_file):
    text = f"seed 3\ndataset {data_file}\ninit 2 kpp\nkernel linear\ndump_assignment\n"
    result = _run(tmp_path, capsys, text)
    assert "naive_kernel(linear)" in result.out
    labels = [int(v) for v in result.out.strip().splitlines()[-4:]]
    assert labels[0] == labels[1]
    assert labels[2] == labels[3]
    assert labels[0] != labels[2]


def test_distortion_line_is_fixed_point(tmp_path, capsys, data_file):
    text = f"seed 1\ndataset {data_file}\ninit 2 random\nkernel linear\n"
    result = _run(tmp_path, capsys, text)
    last = result.out.strip().splitlines()[-1]
    assert len(last.split(".")[1]) == 6
    assert float(last) >= 0.0


def test_naive_and_elkan_agree_on_iterations(tmp_path, capsys, data_file):
    text = (
        f"seed 5\ndataset {data_file}\ninit 2 kpp\n"
        "kernel gaussian 5\nelkan_kernel gaussian 5\n"
    )
    result = _run(tmp_path, capsys, text)
    assert "elkan_kernel(gaussian[5])" in result.out
    assert "ERROR" not in result.err


def test_algorithm_without_initialization(tmp_path, capsys, data_file):
    result = _run(tmp_path, capsys, f"dataset {data_file}\nkernel linear\n")
    assert "initialize centers first!" in result.err


def test_invalid_kernel(tmp_path, capsys):
    result = _run(tmp_path, capsys, "kernel bogus\n")
    assert "Invalid kernel specification" in result.err


def test_unrecognized_command(tmp_path, capsys):
    result = _run(tmp_path, capsys, "frobnicate\n")
    assert "Unrecognized command: <frobnicate>." in result.err


def test_dump_without_results(tmp_path, capsys):
    result = _run(tmp_path, capsys, "dump_assignment\ndump_centers\n")
    assert "Error: no assignment available" in result.err
    assert "Error: no centers available" in result.err


def test_quit_stops_processing(tmp_path, capsys):
    result = _run(tmp_path, capsys, "quit\nfrobnicate\n")
    assert result.err == ""


def test_reads_stdin(monkeypatch, capsys, data_file):
    monkeypatch.setattr("sys.stdin", io.StringIO(f"dataset {data_file}\nexit\n"))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "n = 4, d = 2" in out


def test_dump_centers_after_init(tmp_path, capsys, data_file):
    text = f"seed 2\ndataset {data_file}\ninit 4 random\ndump_centers\n"
    result = _run(tmp_path, capsys, text)
    rows = result.out.strip().splitlines()[-4:]
    parsed = sorted(tuple(float(v) for v in row.split()) for row in rows)
    assert parsed == [(0.0, 0.0), (0.0, 1.0), (10.0, 10.0), (10.0, 11.0)]