"""
EventNode propagation and message store tests.
"""

import pytest

from msgledger import EventNode, LedgerEvent, Message, SubscriptionError, TreeError


@pytest.fixture
def tree():
    root = EventNode("root")
    group = EventNode("group", parent=root)
    leaf = EventNode("leaf", parent=group)
    return root, group, leaf


def test_deep_listeners_see_descendant_events(tree):
    root, group, leaf = tree
    received = []
    root.on("ping", received.append, scope="deep")

    leaf.emit("ping", 1)
    group.emit("ping", 2)
    root.emit("ping", 3)

    assert [event.payload for event in received] == [1, 2, 3]
    assert received[0].origin is leaf


def test_local_listeners_only_see_own_events(tree):
    root, group, leaf = tree
    received = []
    group.on("ping", received.append)

    leaf.emit("ping", "from leaf")
    group.emit("ping", "from group")

    assert [event.payload for event in received] == ["from group"]


def test_listeners_filter_by_event_name(tree):
    root, _, leaf = tree
    received = []
    root.on("message-added", received.append, scope="deep")
    leaf.emit("message-removed", None)
    assert received == []


def test_off_removes_listener():
    node = EventNode()
    received = []
    receipt = node.on("ping", received.append)
    assert node.subscription_count == 1
    assert node.off(receipt)
    assert not node.off(receipt)
    node.emit("ping")
    assert received == []


def test_unknown_scope_is_rejected():
    with pytest.raises(SubscriptionError):
        EventNode().on("ping", print, scope="sideways")


def test_emit_returns_event():
    node = EventNode("n")
    event = node.emit("ping", {"a": 1})
    assert isinstance(event, LedgerEvent)
    assert event.name == "ping"
    assert event.origin is node


def test_reparenting_moves_child(tree):
    root, group, leaf = tree
    other = EventNode("other", parent=root)
    other.add_child(leaf)
    assert leaf.parent is other
    assert leaf not in group.children
    assert group.remove_child(leaf) is False
    assert [n.name for n in leaf.ancestors()] == ["other", "root"]


def test_detached_child_stops_bubbling(tree):
    root, group, leaf = tree
    received = []
    root.on("ping", received.append, scope="deep")
    group.remove_child(leaf)
    leaf.emit("ping")
    assert received == []


class TestMessageStore:

    def test_set_and_remove_emit_events(self):
        node = EventNode()
        events = []
        node.on("message-added", events.append)
        node.on("message-removed", events.append)

        message = node.set_message(Message(key="required", type="validation"))
        assert node.messages == {"required": message}
        node.remove_message("required")

        assert [e.name for e in events] == ["message-added", "message-removed"]
        assert node.messages == {}

    def test_replacing_a_key_removes_the_old_message(self):
        node = EventNode()
        events = []
        node.on("message-added", events.append)
        node.on("message-removed", events.append)

        node.set_message(Message(key="k", type="validation", value="old"))
        node.set_message(Message(key="k", type="validation", value="new"))

        assert [(e.name, e.payload.value) for e in events] == [
            ("message-added", "old"),
            ("message-removed", "old"),
            ("message-added", "new"),
        ]
        assert node.messages["k"].value == "new"

    def test_removing_missing_key_is_silent(self):
        node = EventNode()
        events = []
        node.on("message-removed", events.append)
        assert node.remove_message("nope") is None
        assert events == []

    def test_clear_messages(self):
        node = EventNode()
        node.set_message(Message(key="a"))
        node.set_message(Message(key="b"))
        node.clear_messages()
        assert node.messages == {}


class TestCycles:

    def test_node_cannot_adopt_itself(self):
        node = EventNode("self")
        with pytest.raises(TreeError):
            node.add_child(node)
        assert node.parent is None
        assert node.children == []

    def test_node_cannot_adopt_an_ancestor(self, tree):
        root, group, leaf = tree
        with pytest.raises(TreeError):
            leaf.add_child(root)
        assert root.parent is None
        assert [n.name for n in leaf.ancestors()] == ["group", "root"]

    def test_tree_still_emits_after_rejected_cycle(self, tree):
        root, _, leaf = tree
        received = []
        root.on("ping", received.append, scope="deep")
        with pytest.raises(ValueError):
            leaf.add_child(root)
        leaf.emit("ping", "ok")
        assert [event.payload for event in received] == ["ok"]
