"""
Label management with transaction cascade.

A label's id is its normalized name, so renaming a label changes its id.
Every transaction pointing at the old id has to move with it, in the same
update, or the transactions would reference a label that no longer
exists. These functions compute both new collections together; the
repository persists them in one write.
"""

from typing import Optional, Sequence

from workworth.models.finance import DEFAULT_LABEL_COLOR, Label, Transaction


def create_label(name: str, color: int = DEFAULT_LABEL_COLOR) -> Optional[Label]:
    """Build a label from user input; None for a blank name."""
    if not name or not name.strip():
        return None
    return Label.create(name, color)


def add_label(
    labels: Sequence[Label],
    name: str,
    color: int = DEFAULT_LABEL_COLOR,
) -> list[Label]:
    """
    Append a new label.

    Blank names and names whose id is already taken leave the list
    unchanged: the existing label wins.
    """
    label = create_label(name, color)
    if label is None or any(existing.id == label.id for existing in labels):
        return list(labels)
    return [*labels, label]


def find_label(labels: Sequence[Label], label_id: str) -> Optional[Label]:
    return next((label for label in labels if label.id == label_id), None)


def labels_for_transaction(
    transaction: Transaction,
    labels: Sequence[Label],
) -> list[Label]:
    """Resolve a transaction's label ids; dangling ids are skipped."""
    by_id = {label.id: label for label in labels}
    return [by_id[i] for i in transaction.label_ids if i in by_id]


def rename_label(
    labels: Sequence[Label],
    transactions: Sequence[Transaction],
    old_id: str,
    new_label: Label,
) -> tuple[list[Label], list[Transaction]]:
    """
    Replace label `old_id` with `new_label` and migrate references.

    If `new_label` takes an id already owned by another label, the two
    are merged: the other label is kept as is and the renamed entry is
    dropped. An unknown `old_id` changes nothing.
    """
    if find_label(labels, old_id) is None:
        return list(labels), list(transactions)

    id_changed = new_label.id != old_id
    merging = id_changed and find_label(labels, new_label.id) is not None

    new_labels = []
    for label in labels:
        if label.id == old_id:
            if not merging:
                new_labels.append(new_label)
        else:
            new_labels.append(label)

    if not id_changed:
        return new_labels, list(transactions)

    new_transactions = [
        t.replacing_label(old_id, new_label.id) for t in transactions
    ]
    return new_labels, new_transactions


def delete_label(
    labels: Sequence[Label],
    transactions: Sequence[Transaction],
    label_id: str,
) -> tuple[list[Label], list[Transaction]]:
    """Remove a label and strip it from every transaction."""
    new_labels = [label for label in labels if label.id != label_id]
    new_transactions = [t.without_label(label_id) for t in transactions]
    return new_labels, new_transactions
