import re


def camel_to_snake(name: str) -> str:
    """
    change casing
    InsertCommand -> insert_command
    """
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()
