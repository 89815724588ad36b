"""
Tests for training and saving the demonstration model.
"""
import json

from mlsite.predictor.loader import installed_versions, load_model, metadata_path
from training.data import load_demo_corpus
from training.io import save_artifact
from training.train import build_pipeline, main, train_model


class TestCorpus:

    def test_balanced_labels(self):
        texts, labels = load_demo_corpus()

        assert len(texts) == len(labels)
        assert labels.count("positive") == labels.count("negative")


class TestTrainModel:
    """Test training, evaluation and serialization."""

    def test_pipeline_steps(self):
        pipeline = build_pipeline()

        assert [name for name, _ in pipeline.steps] == ["vectorizer", "classifier"]

    def test_writes_model_and_metadata(self, tmp_path):
        output = tmp_path / "nested" / "model.joblib"

        metadata = train_model(output, input_field="review")

        assert output.is_file()
        saved = json.loads(metadata_path(output).read_text(encoding="utf-8"))
        assert saved == metadata
        assert saved["input_field"] == "review"
        assert saved["classes"] == ["negative", "positive"]
        assert saved["sklearn_version"] == installed_versions()["sklearn_version"]
        assert 0.0 <= saved["accuracy"] <= 1.0
        assert 0.0 <= saved["f1"] <= 1.0

    def test_saved_model_accepts_raw_text(self, tmp_path):
        output = tmp_path / "model.joblib"
        train_model(output)

        predictor = load_model(output)

        assert predictor.predict_one("great excellent fantastic love") == "positive"

    def test_without_output_nothing_is_written(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        metadata = train_model(None)

        assert "accuracy" in metadata
        assert list(tmp_path.iterdir()) == []

    def test_training_is_reproducible(self):
        first = train_model(None, random_state=7)
        second = train_model(None, random_state=7)

        assert first["accuracy"] == second["accuracy"]
        assert first["f1"] == second["f1"]

    def test_main(self, tmp_path, capsys):
        output = tmp_path / "model.joblib"

        main(["--output", str(output)])

        assert output.is_file()
        assert "Accuracy:" in capsys.readouterr().out


class TestSaveArtifact:
    """Test writing the model and its metadata sidecar."""

    def test_writes_both_files(self, tmp_path):
        path = tmp_path / "deep" / "dir" / "model.joblib"

        sidecar = save_artifact(build_pipeline(), {"input_field": "text"}, path)

        assert path.is_file()
        assert sidecar == metadata_path(path)
        assert json.loads(sidecar.read_text(encoding="utf-8")) == {"input_field": "text"}

    def test_overwrites_previous_artifact(self, tmp_path):
        path = tmp_path / "model.joblib"
        save_artifact(build_pipeline(), {"version": 1}, path)

        save_artifact(build_pipeline(), {"version": 2}, path)

        assert json.loads(metadata_path(path).read_text(encoding="utf-8")) == {"version": 2}
