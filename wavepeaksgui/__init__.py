"""PySide6 front-end: waveform view with regions and a playhead."""


def main():
    from .mainwindow import main as _main
    return _main()
