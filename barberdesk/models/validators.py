import re


NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ\s]+$")
PHONE_PATTERN = re.compile(r"^[\d\s()-]+$")


def check_person_name(value: str) -> str:
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Nome deve ter no mínimo 3 caracteres")
    if not NAME_PATTERN.match(value):
        raise ValueError("Nome deve conter apenas letras e espaços")
    return value


def check_phone(value: str) -> str:
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("Telefone deve conter apenas números")
    if len(value) < 10:
        raise ValueError("Telefone deve ter no mínimo 10 dígitos")
    return value
