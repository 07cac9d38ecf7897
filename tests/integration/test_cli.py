"""
Tests for the skirmish command line entry point.
"""
import pytest

from skirmish.main import build_parser, main

from tests.battle_maps import DUEL_MAP, EXAMPLE_MAP


@pytest.fixture
def map_file(tmp_path):
    def write(text: str, name: str = "map.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


class TestArguments:
    """Test argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["map.txt"])

        assert args.input == "map.txt"
        assert args.config is None
        assert not args.boost
        assert not args.render
        assert not args.debug
        assert args.log_dir is None

    def test_input_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Test running battles from the command line."""

    def test_duel_score(self, map_file, capsys):
        assert main([map_file(DUEL_MAP)]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert "Goblins win: 67 rounds x 2 hp" in lines
        assert lines[-1] == "134"

    def test_info_log_printed(self, map_file, capsys):
        main([map_file(DUEL_MAP)])

        out = capsys.readouterr().out
        assert "[BTL] Elf E0 defeated by Goblin G0 in round 67" in out
        assert "[ATK]" not in out

    def test_debug_prints_attacks(self, map_file, capsys):
        main([map_file(DUEL_MAP), "--debug"])

        out = capsys.readouterr().out
        assert "[ATK] Goblin G0 hits Elf E0 for 3 (197 hp left)" in out
        assert "[DBG] Config: built-in defaults, elf attack 3" in out

    def test_render(self, map_file, capsys):
        main([map_file(DUEL_MAP), "--render"])

        assert "#G.   G(2)" in capsys.readouterr().out.splitlines()

    def test_boost(self, map_file, capsys):
        assert main([map_file(EXAMPLE_MAP), "--boost"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[-4:] == [
            "Goblins win: 47 rounds x 590 hp",
            "27730",
            "Elf attack power 15: 29 rounds x 172 hp",
            "4988",
        ]

    def test_boost_out_of_range(self, map_file, tmp_path, capsys):
        config = tmp_path / "battle.yaml"
        config.write_text("boost:\n  min: 4\n  max: 5\n", encoding="utf-8")

        main([map_file(EXAMPLE_MAP), "--boost", "--config", str(config)])

        assert capsys.readouterr().out.splitlines()[-1] == (
            "No elf attack power in range wins without losses"
        )

    def test_config_changes_attack_power(self, map_file, tmp_path, capsys):
        config = tmp_path / "battle.yaml"
        config.write_text("units:\n  attack_power:\n    elf: 4\n", encoding="utf-8")

        main([map_file(DUEL_MAP), "--config", str(config)])

        # The elf now needs 50 hits and the goblin 67
        lines = capsys.readouterr().out.splitlines()
        assert lines[-2:] == ["Elves win: 50 rounds x 50 hp", "2500"]

    def test_log_dir(self, map_file, tmp_path, capsys):
        log_dir = tmp_path / "logs"

        main([map_file(DUEL_MAP), "--log-dir", str(log_dir)])

        files = list(log_dir.glob("battle_*.log"))
        assert len(files) == 1
        assert "Goblins win after 67 full rounds" in files[0].read_text(encoding="utf-8")

    def test_log_dir_from_config(self, map_file, tmp_path, capsys):
        log_dir = tmp_path / "configured"
        config = tmp_path / "battle.yaml"
        config.write_text(f"log:\n  directory: {log_dir}\n", encoding="utf-8")

        main([map_file(DUEL_MAP), "--config", str(config), "--log-dir"])

        assert len(list(log_dir.glob("battle_*.log"))) == 1


class TestErrors:
    """Test failures reported on stderr."""

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_unknown_symbol(self, map_file, capsys):
        assert main([map_file("###\n#GX\n###\n")]) == 1
        assert "Unknown map symbol" in capsys.readouterr().err

    def test_bad_config(self, map_file, tmp_path, capsys):
        config = tmp_path / "battle.yaml"
        config.write_text("units:\n  hit_points: 0\n", encoding="utf-8")

        assert main([map_file(DUEL_MAP), "--config", str(config)]) == 1
        assert "Error:" in capsys.readouterr().err

    @pytest.mark.parametrize("content", ["units: 5\n", "units:\n  attack_power: [3, 3]\n", "log: [1]\n"])
    def test_config_section_of_wrong_type(self, map_file, tmp_path, capsys, content):
        config = tmp_path / "battle.yaml"
        config.write_text(content, encoding="utf-8")

        assert main([map_file(DUEL_MAP), "--config", str(config)]) == 1
        assert "must be a mapping" in capsys.readouterr().err

    def test_stalemate(self, map_file, capsys):
        assert main([map_file("#######\n#E.#.G#\n#######\n")]) == 1
        assert "stalled" in capsys.readouterr().err
