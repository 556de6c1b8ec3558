import os
from pathlib import Path
from typing import Any, Union
from datetime import datetime
import yaml


def read_text_file(file_path: Union[str, Path]) -> str:
    """
    Read a UTF-8 text file.
    
    Args:
        file_path: Path to the file
        
    Returns:
        The full file contents
        
    Raises:
        FileNotFoundError: If the file doesn't exist
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return f.read()


def write_text_file(file_path: Union[str, Path], content: str) -> str:
    """
    Write text to a file, creating parent directories as needed.
    
    Existing files are overwritten.
    
    Args:
        file_path: Destination path
        content: Text to write
        
    Returns:
        The path that was written
    """
    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
    return str(file_path)


def load_yaml_file(file_path: Union[str, Path]) -> Any:
    """
    Load YAML data from a file.
    
    Args:
        file_path: Path to the YAML file
        
    Returns:
        The parsed document (None for an empty file)
        
    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file contains invalid YAML
    """
    return yaml.safe_load(read_text_file(file_path))


def file_mtime(file_path: Union[str, Path]) -> datetime:
    """Modification time of a file as a naive local datetime."""
    return datetime.fromtimestamp(os.stat(file_path).st_mtime)
