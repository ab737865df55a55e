"""
PII masking for client contact details written to logs.
"""
from wholesale.domain.order import ClientInfo


def mask_email(email: str) -> str:
    """Mask email address."""
    if "@" not in email:
        return email
    local, domain = email.split("@", 1)
    if len(local) <= 2:
        masked = "**"
    else:
        masked = local[:2] + "*" * (len(local) - 2)
    return f"{masked}@{domain}"


def mask_phone(phone: str) -> str:
    """Mask phone number, keeping the first and last two characters."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 4) + phone[-2:]


def mask_name(name: str) -> str:
    if len(name) <= 2:
        return "**"
    return name[0] + "*" * (len(name) - 2) + name[-1]


def mask_client_info(info: ClientInfo) -> dict:
    """Loggable view of a client: business name kept, personal details masked."""
    return {
        "name": info.name,
        "contact_person": mask_name(info.contact_person) if info.contact_person else "",
        "phone": mask_phone(info.phone) if info.phone else "",
        "email": mask_email(info.email) if info.email else "",
    }


def mask_pii_in_dict(data: dict) -> dict:
    """Mask PII in dictionary recursively."""
    masked = {}
    for key, value in data.items():
        key_lower = key.lower()
        if isinstance(value, dict):
            masked[key] = mask_pii_in_dict(value)
        elif isinstance(value, list):
            masked[key] = [mask_pii_in_dict(item) if isinstance(item, dict) else item for item in value]
        elif not isinstance(value, str):
            masked[key] = value
        elif "email" in key_lower or "@" in value:
            masked[key] = mask_email(value)
        elif "phone" in key_lower:
            masked[key] = mask_phone(value)
        elif key_lower in ("contact_person", "contactperson", "address"):
            masked[key] = mask_name(value)
        else:
            masked[key] = value
    return masked
