from amarnote.core.modules.content.models import Content
from amarnote.core.modules.content.text import block_text
from amarnote.core.modules.history.models import DiffType, VersionDiff


def compare_versions(old: Content, new: Content) -> list[VersionDiff]:
    """Positional block diff: blocks are compared index by index by their text."""
    diffs: list[VersionDiff] = []
    old_blocks, new_blocks = old.blocks, new.blocks

    for index in range(max(len(old_blocks), len(new_blocks))):
        if index >= len(old_blocks):
            diffs.append(VersionDiff(type=DiffType.ADDED, block_index=index, new_content=block_text(new_blocks[index])))
        elif index >= len(new_blocks):
            diffs.append(VersionDiff(type=DiffType.REMOVED, block_index=index, old_content=block_text(old_blocks[index])))
        else:
            old_text = block_text(old_blocks[index])
            new_text = block_text(new_blocks[index])
            if old_text != new_text:
                diffs.append(
                    VersionDiff(type=DiffType.MODIFIED, block_index=index, old_content=old_text, new_content=new_text)
                )

    return diffs
