import json

import pytest

from wingflow.cli import main, parse_arguments
from wingflow.core.parameters import RenderMode


def test_parse_arguments_builds_config_and_airfoil():
    args = parse_arguments(['--naca', '0012', '--angle', '5', '--mode', 'streamlines',
                            '--particles', '200', '--heatmap', '--no-wake', '--turbulence', '2'])
    assert args.sim_config.population_size == 200
    assert args.sim_config.render_mode is RenderMode.STREAMLINES
    assert args.sim_config.heatmap_enabled
    assert not args.sim_config.wake_enabled
    assert args.sim_config.turbulence_intensity == 2.0
    assert args.airfoil.naca.code == '0012'
    assert args.airfoil.angle_deg == 5.0


def test_config_file_with_overrides(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'population_size': 300, 'base_speed': 0.2}))
    args = parse_arguments(['--config', str(path), '--particles', '120'])
    assert args.sim_config.population_size == 120
    assert args.sim_config.base_speed == 0.2


@pytest.mark.parametrize('argv', [
    ['--naca', '12'],
    ['--particles', '0'],
    ['--speed', '-1'],
    ['--naca', '0012', '--control-points', 'foil.json'],
])
def test_invalid_arguments_exit(argv):
    with pytest.raises(SystemExit):
        parse_arguments(argv)


def test_thickness_override_rejected_for_freeform(tmp_path):
    path = tmp_path / 'foil.json'
    path.write_text(json.dumps([[0, 0], [0.5, 0.1], [1, 0], [0.5, -0.1]]))
    with pytest.raises(SystemExit):
        parse_arguments(['--control-points', str(path), '--thickness', '12'])
    args = parse_arguments(['--control-points', str(path)])
    assert args.airfoil.mode == 'freeform'


def test_headless_run(capsys):
    assert main(['--headless', '--frames', '10', '--particles', '150', '--seed', '1',
                 '--mode', 'streamlines', '--angle', '18']) == 0
    out = capsys.readouterr().out
    assert 'particles: 150' in out
    assert 'mean_wake_spread' in out


def test_config_file_with_bad_types_reports_usage_error(tmp_path, capsys):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'base_speed': 'fast'}))
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(['--config', str(path), '--headless'])
    assert excinfo.value.code == 2
    assert 'base_speed must be a number' in capsys.readouterr().err
