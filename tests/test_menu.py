import io

import pytest

from linetrack.menu import Key, Menu, Page, Screen, main
from linetrack.pid import ControlParams


@pytest.fixture
def menu(tmp_path):
    return Menu(storage_path=tmp_path / "params.bin", pause=0)


def test_up_wraps_to_last_item(menu):
    menu.press(Key.UP)
    assert menu.item == 8


def test_down_wraps_to_first_item(menu):
    for _ in range(8):
        menu.press(Key.DOWN)
    assert menu.item == 1


def test_up_then_down_returns(menu):
    menu.press(Key.DOWN)
    menu.press(Key.DOWN)
    menu.press(Key.UP)
    assert menu.item == 2


def test_select_first_item_starts_car(menu):
    menu.press(Key.SELECT)
    assert menu.car_go is True
    assert menu.page is Page.MAIN


def test_select_opens_gyro_page(menu):
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    assert menu.page is Page.GYRO
    assert menu.item == 1


def test_render_main_page(menu):
    screen = menu.render()
    assert screen.text_at(60, 0) == "main_menu"
    assert screen.text_at(16, 30) == "car_go"
    assert screen.text_at(0, 32) == "->"


def test_cursor_moves_and_old_cursor_is_cleared(menu):
    menu.render()
    menu.press(Key.DOWN)
    screen = menu.render()
    assert screen.text_at(0, 48) == "->"
    assert screen.text_at(0, 32) is None


def test_gyro_editing_changes_kp(menu):
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    menu.press(Key.SELECT)
    assert menu.editing is True
    menu.press(Key.UP)
    menu.press(Key.UP)
    menu.press(Key.DOWN)
    assert menu.params.gyro.kp == pytest.approx(0.1)
    assert menu.params.gyro.ki == 0.0
    assert menu.render().text_at(0, 32) == "*"


def test_gyro_editing_ki_and_leave(menu):
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    menu.press(Key.DOWN)
    assert menu.params.gyro.ki == pytest.approx(-0.1)
    menu.press(Key.BACK)
    assert menu.editing is False
    menu.press(Key.DOWN)
    assert menu.item == 3


def test_gyro_back_returns_to_main(menu):
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    menu.press(Key.UP)
    assert menu.item == 3
    menu.press(Key.SELECT)
    assert menu.page is Page.MAIN
    assert menu.item == 1
    assert menu.editing is False


def test_gyro_page_shows_values(menu):
    menu.params.gyro.kp = 1.5
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    screen = menu.render()
    assert screen.text_at(60, 0) == "gyro_pid"
    assert float(screen.text_at(150, 30)) == pytest.approx(1.5)


def test_unhandled_page_ignores_keys(menu):
    menu.press(Key.DOWN)
    menu.press(Key.DOWN)
    menu.press(Key.SELECT)
    assert menu.page is Page.ANGLE
    menu.press(Key.SELECT)
    menu.press(Key.UP)
    assert menu.page is Page.ANGLE
    assert menu.item == 1
    assert menu.render().items == {}


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "params.bin"
    saver = Menu(storage_path=path, pause=0)
    saver.params.gyro.kp = 2.5
    saver.params.user.target_speed = 30.0
    saver.press(Key.UP)
    saver.press(Key.UP)
    saver.press(Key.SELECT)
    assert path.exists()

    loader = Menu(params=ControlParams(), storage_path=path, pause=0)
    loader.press(Key.UP)
    loader.press(Key.SELECT)
    assert loader.params.gyro.kp == pytest.approx(2.5)
    assert loader.params.user.target_speed == pytest.approx(30.0)


def test_load_missing_file_raises(menu):
    menu.press(Key.UP)
    with pytest.raises(FileNotFoundError):
        menu.press(Key.SELECT)


def test_press_accepts_key_number(menu):
    menu.press(2)
    assert menu.item == 2
    with pytest.raises(ValueError):
        menu.press(9)


def test_screen_lines_layout():
    screen = Screen()
    screen.show_string(0, 32, "->")
    screen.show_string(16, 32, "ab")
    assert screen.lines()[2] == "->ab"
    screen.clear()
    assert screen.lines() == []


def test_main_runs_key_script(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("down\nselect\nq\n"))
    assert main(["--params", str(tmp_path / "p.bin")]) == 0
    out = capsys.readouterr().out
    assert "main_menu" in out
    assert "gyro_pid" in out
    assert "gyro_kp:" in out