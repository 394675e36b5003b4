"""Build configuration for Photo Sheet Maker.

Usage:
    pip install -e .[test]      # development install
    python setup.py py2app      # macOS only, produces dist/Photo Sheet.app
"""
import sys

from setuptools import setup

APP = ['sheet_app.py']
DATA_FILES = []
OPTIONS = {
    'argv_emulation': False,  # must be False for Qt apps
    'plist': {
        'CFBundleName': 'Photo Sheet',
        'CFBundleDisplayName': 'Photo Sheet',
        'CFBundleIdentifier': 'com.photosheet.app',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0',
        'LSMinimumSystemVersion': '11.0',
        'NSHighResolutionCapable': True,
        'CFBundleDocumentTypes': [{
            'CFBundleTypeName': 'Image',
            'CFBundleTypeRole': 'Viewer',
            'LSHandlerRank': 'Alternate',
            'LSItemContentTypes': ['public.image'],
        }],
    },
    'packages': ['PySide6', 'PIL'],
    'strip': False,  # avoid "Operation not permitted" on macOS SIP-protected binaries
}

# Bundle options only apply to `python setup.py py2app`
app_kwargs = {}
if 'py2app' in sys.argv:
    app_kwargs = dict(
        app=APP,
        data_files=DATA_FILES,
        options={'py2app': OPTIONS},
        setup_requires=['py2app'],
    )

setup(
    name='photo-sheet-maker',
    version='1.0.0',
    description='Tile copies of one photo onto a printable page',
    py_modules=['models', 'tiler', 'sheet_files', 'views', 'controller', 'sheet_app'],
    python_requires='>=3.10',
    install_requires=[
        'Pillow>=9.1',
        'PySide6>=6.4',
    ],
    extras_require={
        'test': ['pytest', 'pytest-qt'],
    },
    entry_points={
        'gui_scripts': ['photo-sheet=sheet_app:main'],
    },
    **app_kwargs,
)
