from enum import StrEnum


class SessionCategory(StrEnum):
    SALSA = 'salsa'
    BACHATA = 'bachata'
    REGGAETON = 'reggaeton'

    @property
    def levels(self) -> tuple[int, ...]:
        """Levels this category can be taught at; empty when the category has no levels."""
        return _CATEGORY_LEVELS[self]


_CATEGORY_LEVELS: dict[SessionCategory, tuple[int, ...]] = {
    SessionCategory.SALSA: (1, 2, 3),
    SessionCategory.BACHATA: (1, 2),
    SessionCategory.REGGAETON: (),
}
