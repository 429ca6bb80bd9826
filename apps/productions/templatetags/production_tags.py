"""
Template filters used across CrewBook templates.

Filters:
  display(value, kind)   → DisplayInfo for a status/role/notification value
  role_label(role)       → human label for a crew role
  get_item(d, key)       → d[key], used for dict lookups with a variable key
"""

from django import template

from apps.productions import display as display_table

register = template.Library()


@register.filter
def display(value: str, kind: str):
    """
    Return the DisplayInfo for `value` in the `kind` table.

    Usage: {% with info=production.status|display:"production" %}{{ info.label }}{% endwith %}
    """
    return display_table.lookup(kind, value)


@register.filter
def role_label(role: str) -> str:
    return display_table.role_label(role)


@register.filter
def get_item(dictionary: dict, key):
    """
    Return dictionary[key], supporting variable keys in templates.

    Returns:
        The value at that key, or None if missing.
    """
    if dictionary is None:
        return None
    return dictionary.get(key)
