from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryInfo:
    key: str
    name: str
    icon: str
    type: str           # 'income' | 'expense' | 'unknown'

    @property
    def is_known(self) -> bool:
        return self.type != "unknown"
