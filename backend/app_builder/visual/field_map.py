from typing import List, Optional, Sequence, Tuple


DEFAULT_FIELDS = ("Name", "Email", "Age")

# Ordered: the first fragment contained in the entity name wins.
DEFAULT_FIELD_TABLE = (
    ("student", ("Name", "Email", "Age")),
    ("course", ("Title", "Code", "Credits")),
    ("grade", ("Student", "Course", "Score")),
    ("teacher", ("Name", "Subject", "Email")),
    ("admin", ("Name", "Role", "Permissions")),
    ("pet", ("Name", "Species", "Age")),
    ("owner", ("Name", "Phone", "Email")),
    ("appointment", ("Date", "Time", "Reason")),
    ("order", ("Order Number", "Date", "Total")),
    ("product", ("Name", "Price", "Stock")),
    ("customer", ("Name", "Email", "Phone")),
    ("book", ("Title", "Author", "ISBN")),
    ("member", ("Name", "Email", "Membership Type")),
    ("employee", ("Name", "Position", "Department")),
    ("task", ("Title", "Due Date", "Status")),
    ("project", ("Name", "Deadline", "Owner")),
    ("event", ("Title", "Date", "Location")),
)


class EntityFieldMap:
    """Maps an entity name to the form fields shown for it."""

    def __init__(
        self,
        table: Sequence[Tuple[str, Sequence[str]]] = DEFAULT_FIELD_TABLE,
        default: Sequence[str] = DEFAULT_FIELDS,
    ):
        self.table = [(fragment.lower(), list(fields)) for fragment, fields in table]
        self.default = list(default)

    def fields_for(self, entity: Optional[str]) -> List[str]:
        name = (entity or "").strip().lower()
        for fragment, fields in self.table:
            if fragment and fragment in name:
                return list(fields)
        return list(self.default)
