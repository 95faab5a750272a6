import json
import unittest

from arena.game.events.battle_event import BattleEvent
from arena.game.schema.enums import EventType


class BattleEventTest(unittest.TestCase):
    def test_to_dict_uses_wire_names(self) -> None:
        event = BattleEvent(
            type=EventType.DAMAGE,
            turn=3,
            source_player=1,
            actor_id="p1-a",
            target_id="p2-a",
            payload={"damage": 12, "remaining": 30},
            description="Ember dealt 12 damage",
        )
        data = event.to_dict()
        self.assertEqual(data["type"], "damage")
        self.assertEqual(data["payload"], {"damage": 12, "remaining": 30})
        self.assertEqual(BattleEvent.from_dict(data), event)

    def test_defaults(self) -> None:
        event = BattleEvent(type=EventType.TURN_START, turn=1, source_player=0)
        self.assertIsNone(event.actor_id)
        self.assertIsNone(event.target_id)
        self.assertEqual(event.payload, {})
        self.assertEqual(event.description, "")

    def test_str_is_sorted_json(self) -> None:
        event = BattleEvent(
            type=EventType.FAINT, turn=2, source_player=2, target_id="p2-a"
        )
        parsed = json.loads(str(event))
        self.assertEqual(parsed["type"], "faint")
        self.assertEqual(list(parsed), sorted(parsed))

    def test_from_dict_rejects_unknown_type(self) -> None:
        with self.assertRaises(ValueError):
            BattleEvent.from_dict({"type": "explode", "turn": 1, "source_player": 1})


if __name__ == "__main__":
    unittest.main()
