from unittest.mock import MagicMock
import pytest
from typer.testing import CliRunner

from photosweep.cli import app
from photosweep.imaging.loader import ImageLoader
from tests.helpers.image_factory import encode, fake_response, horizontal_gradient, save_image

URL = "https://photos.example.com/item/abc"


@pytest.fixture
def serve(monkeypatch):
    """Route every loader the CLI builds through a fake session."""
    session = MagicMock()

    def factory(*args, **kwargs):
        return ImageLoader(session=session, timeout=kwargs.get("timeout", 30.0))

    monkeypatch.setattr("photosweep.cli.ImageLoader", factory)
    monkeypatch.setattr("photosweep.deletion.worker.ImageLoader", factory)
    return session


class TestCLIBasicFunctionality:
    def test_help_command_works(self):
        runner = CliRunner()
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "compare" in result.stdout
        assert "sweep" in result.stdout

    def test_sweep_help_lists_options(self):
        runner = CliRunner()
        result = runner.invoke(app, ["sweep", "--help"])

        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        assert "--hash-size" in result.stdout


class TestCompareCommand:
    def test_same_image(self, tmp_path, serve):
        img = horizontal_gradient()
        local = save_image(img, tmp_path / "photo.png")
        serve.get.return_value = fake_response(200, encode(img))

        result = CliRunner().invoke(app, ["compare", str(local), URL])

        assert result.exit_code == 0
        assert "same image" in result.stdout
        assert "distance:  0" in result.stdout
        assert local.exists()

    def test_different_image(self, tmp_path, serve):
        local = save_image(horizontal_gradient(), tmp_path / "photo.png")
        serve.get.return_value = fake_response(200, encode(horizontal_gradient(reverse=True)))

        result = CliRunner().invoke(app, ["compare", str(local), URL])

        assert result.exit_code == 1
        assert "different images" in result.stdout

    def test_fetch_error(self, tmp_path, serve):
        local = save_image(horizontal_gradient(), tmp_path / "photo.png")
        serve.get.return_value = fake_response(404)

        result = CliRunner().invoke(app, ["compare", str(local), URL])

        assert result.exit_code == 2


class TestSweepCommand:
    def test_deletes_matching_files(self, tmp_path, serve):
        img = horizontal_gradient()
        match = save_image(img, tmp_path / "match.png")
        other = save_image(img, tmp_path / "other.png")
        serve.get.side_effect = lambda url, **kwargs: {
            f"{URL}/1": fake_response(200, encode(img)),
            f"{URL}/2": fake_response(200, encode(horizontal_gradient(reverse=True))),
        }[url]

        result = CliRunner().invoke(app, ["sweep", f"{match}={URL}/1", f"{other}={URL}/2"])

        assert result.exit_code == 0
        assert not match.exists()
        assert other.exists()
        assert "1 deleted, 1 kept, 0 skipped on error" in result.stdout

    def test_dry_run_deletes_nothing(self, tmp_path, serve):
        img = horizontal_gradient()
        match = save_image(img, tmp_path / "match.png")
        serve.get.return_value = fake_response(200, encode(img))

        result = CliRunner().invoke(app, ["sweep", "--dry-run", f"{match}={URL}"])

        assert result.exit_code == 0
        assert match.exists()
        assert "dry_run" in result.stdout

    def test_urls_with_query_strings(self, tmp_path, serve):
        img = horizontal_gradient()
        match = save_image(img, tmp_path / "match.png")
        serve.get.return_value = fake_response(200, encode(img))

        result = CliRunner().invoke(app, ["sweep", f"{match}={URL}?w=2048&h=1536"])

        assert result.exit_code == 0
        serve.get.assert_called_once()
        assert serve.get.call_args.args[0] == f"{URL}?w=2048&h=1536"

    def test_malformed_pair(self, serve):
        result = CliRunner().invoke(app, ["sweep", "no-separator-here"])

        assert result.exit_code != 0
        serve.get.assert_not_called()


class TestHashSizeValidation:
    def test_compare_rejects_hash_size_below_two(self, tmp_path, serve):
        local = save_image(horizontal_gradient(), tmp_path / "photo.png")

        result = CliRunner().invoke(app, ["compare", str(local), URL, "--hash-size", "1"])

        assert result.exit_code == 2
        serve.get.assert_not_called()

    def test_sweep_rejects_hash_size_below_two(self, tmp_path, serve):
        local = save_image(horizontal_gradient(), tmp_path / "photo.png")

        result = CliRunner().invoke(app, ["sweep", "--hash-size", "1", f"{local}={URL}"])

        assert result.exit_code == 2
        serve.get.assert_not_called()
        assert local.exists()


class TestPairParsing:
    def test_local_path_containing_equals(self, tmp_path, serve):
        img = horizontal_gradient()
        folder = tmp_path / "a=b"
        folder.mkdir()
        match = save_image(img, folder / "p.png")
        serve.get.return_value = fake_response(200, encode(img))

        result = CliRunner().invoke(app, ["sweep", f"{match}={URL}"])

        assert result.exit_code == 0
        assert not match.exists()
        assert serve.get.call_args.args[0] == URL

    def test_pair_without_url_scheme(self, tmp_path, serve):
        result = CliRunner().invoke(app, ["sweep", f"{tmp_path / 'p.png'}=photos.example.com/x"])

        assert result.exit_code != 0
        serve.get.assert_not_called()
