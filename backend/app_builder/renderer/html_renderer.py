from html import escape
from typing import List, Mapping, Optional, Sequence

from app_builder.ir.app_description import AppDescription
from app_builder.visual.field_map import EntityFieldMap
from app_builder.visual.visual_style import merge_style, default_style


PAGE_STYLE = (
    "padding:3rem 2rem;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;"
    "max-width:1200px;margin:0 auto;background-color:#121212;color:#e0e0e0;"
)


def _summary_item(label: str, value: str) -> str:
    return (
        '<div class="summary-item">'
        f'<div class="summary-label">{escape(label)}</div>'
        f'<div class="summary-value">{escape(value)}</div>'
        "</div>"
    )


def render_summary(app: AppDescription) -> str:
    parts = [
        '<section class="requirements">',
        "<h2>AI Extracted Requirements</h2>",
        '<div class="summary-grid">',
        _summary_item("App Name", app.app_name),
        _summary_item("Entities", ", ".join(app.entities)),
        _summary_item("Roles", ", ".join(app.roles)),
        _summary_item("Features", ", ".join(app.features)),
        "</div>",
        "</section>",
    ]
    return "\n".join(parts)


def render_role_tabs(roles: Sequence[str], style: Mapping[str, str]) -> str:
    parts = ['<nav class="role-tabs">', "<h3>Role Switcher</h3>"]
    for index, role in enumerate(roles):
        selected = "true" if index == 0 else "false"
        parts.append(
            f'<button type="button" role="tab" aria-selected="{selected}" '
            f'style="border-color:{escape(style["buttonColor"])};'
            f'color:{escape(style["buttonColor"])};font-size:{escape(style["fontSize"])}">'
            f"{escape(role)}</button>"
        )
    parts.append("</nav>")
    return "\n".join(parts)


def render_entity_form(entity: str, fields: List[str], style: Mapping[str, str]) -> str:
    form_style = (
        f"background:{escape(style['formBackground'])};"
        f"border-radius:{escape(style['borderRadius'])};"
        f"font-size:{escape(style['fontSize'])}"
    )
    parts = [
        f'<form class="entity-form" data-entity="{escape(entity)}" style="{form_style}">',
        f"<h4>{escape(entity)} Form</h4>",
    ]

    for field in fields:
        parts.append(
            '<div class="field">'
            f"<label>{escape(field)}</label>"
            f'<input type="text" placeholder="Enter {escape(field.lower())}"/>'
            "</div>"
        )

    parts.append(
        f'<button type="button" style="background-color:{escape(style["buttonColor"])};'
        f'border-radius:{escape(style["borderRadius"])};font-size:{escape(style["fontSize"])}">'
        f"Save {escape(entity)}</button>"
    )
    parts.append("</form>")
    return "\n".join(parts)


def render_mock_ui(
    app: AppDescription,
    style: Optional[Mapping[str, str]] = None,
    field_map: Optional[EntityFieldMap] = None,
) -> str:
    """
    Render the mock interface for an extracted app as a standalone HTML page:
    requirement summary, one tab per role and one form per entity.

    `style` is merged over the default style so partial sets are fine.
    """
    style = merge_style(default_style(), style)
    field_map = field_map or EntityFieldMap()

    html = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8"/>',
        f"<title>{escape(app.app_name)}</title>",
        "</head>",
        f'<body style="{PAGE_STYLE}">',
        f"<h1>{escape(app.app_name)}</h1>",
        render_summary(app),
        "<hr/>",
        '<section class="mock-ui">',
        "<h2>Generated Mock UI</h2>",
        render_role_tabs(app.roles, style),
        '<div class="entity-forms">',
        "<h3>Entity Forms</h3>",
    ]

    for entity in app.entities:
        html.append(render_entity_form(entity, field_map.fields_for(entity), style))

    html += [
        "</div>",
        "</section>",
        "</body>",
        "</html>",
    ]
    return "\n".join(html)
