import pytest

from sikshasetu.core.post_states import PostState, assert_transition


def test_publish_path():
    assert_transition(None, PostState.DRAFT)
    assert_transition(PostState.DRAFT, PostState.PUBLISHED)
    assert_transition(PostState.PUBLISHED, PostState.EDITED)
    assert_transition(PostState.EDITED, PostState.EDITED)
    assert_transition(PostState.EDITED, PostState.DELETED)
    assert_transition(PostState.PUBLISHED, PostState.DELETED)


@pytest.mark.parametrize(
    "src,dst",
    [
        (PostState.DELETED, PostState.EDITED),
        (PostState.DELETED, PostState.PUBLISHED),
        (PostState.DRAFT, PostState.EDITED),
        (PostState.PUBLISHED, PostState.DRAFT),
        (None, PostState.PUBLISHED),
    ],
)
def test_illegal_transitions(src, dst):
    with pytest.raises(ValueError):
        assert_transition(src, dst)
