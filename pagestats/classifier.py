from .models import Category

IMAGE_TYPES = frozenset(["Image"])
BUNDLE_TYPES = frozenset(["Document", "Font", "Script", "Stylesheet"])


def classify(resource_type) -> Category:
    """CDP ResourceType -> images / bundle / ignored (固定映射，不可配置)"""
    if resource_type in IMAGE_TYPES:
        return Category.IMAGE
    if resource_type in BUNDLE_TYPES:
        return Category.BUNDLE
    return Category.IGNORED
