import json
import os


def save_data(var, file: str):
    """Saves a JSON-serializable object to a ``.json`` file"""
    if os.path.splitext(file)[-1] == '.json':
        with open(file, 'w') as f:
            json.dump(var, f, indent=4)
    else:
        raise ValueError(f'Invalid file extension for data save: {file}. Current available choices: .json')


def load_data(file: str):
    if os.path.splitext(file)[-1] == '.json':
        with open(file, 'r') as f:
            var = json.load(f)
        return var
    else:
        raise ValueError(f'Invalid file extension for data load: {file}. Current available choices: .json')


def write_text_file(file: str, text: str):
    """Writes ``text`` to ``file`` in one call, replacing any existing contents"""
    with open(file, 'w', newline='') as f:
        f.write(text)
