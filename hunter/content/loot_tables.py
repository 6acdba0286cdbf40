"""
Loot tables for the Hunter System.

Names and descriptions keyed by (item type, rarity). Every pool holds
several options; the reward generator picks one name and one description
from the matching pool.
"""

from __future__ import annotations

from hunter.models.item import ItemType, Rarity

ITEM_NAMES: dict[ItemType, dict[Rarity, list[str]]] = {
    ItemType.WEAPON: {
        Rarity.COMMON: ["Iron Dagger", "Wooden Staff", "Short Sword", "Training Bow"],
        Rarity.RARE: ["Steel Blade", "Mage's Staff", "Hunter's Longbow", "Battle Axe"],
        Rarity.EPIC: ["Crimson Edge", "Arcane Scepter", "Shadow Bow", "Frost Hammer"],
        Rarity.LEGENDARY: ["Demon Fang", "Staff of the Ancients", "Moonlight Arrows", "Titan's Maul"],
        Rarity.MYTHIC: ["Sovereign's Wrath", "World Tree Staff", "Void Reaper", "Dragon Slayer"],
    },
    ItemType.ARMOR: {
        Rarity.COMMON: ["Leather Vest", "Cloth Robe", "Iron Helmet", "Worn Boots"],
        Rarity.RARE: ["Knight's Plate", "Mage Robes", "Steel Greaves", "Hunter's Cloak"],
        Rarity.EPIC: ["Dragonscale Mail", "Shadowweave Robes", "Titanium Armor", "Phoenix Mantle"],
        Rarity.LEGENDARY: ["Immortal Plate", "Astral Vestments", "Demon Lord Armor", "Celestial Garb"],
        Rarity.MYTHIC: ["Monarch's Regalia", "Eternal Night Armor", "Divine Protection", "World Breaker Plate"],
    },
    ItemType.ACCESSORY: {
        Rarity.COMMON: ["Simple Ring", "Leather Band", "Bronze Amulet", "Glass Earring"],
        Rarity.RARE: ["Silver Ring", "Enchanted Bracelet", "Jade Necklace", "Sapphire Earrings"],
        Rarity.EPIC: ["Ring of Power", "Mana Bracers", "Amulet of Vitality", "Shadow Earrings"],
        Rarity.LEGENDARY: ["Ring of the Monarch", "Bracelet of Time", "Heart of the Dragon", "Eyes of Eternity"],
        Rarity.MYTHIC: ["Absolute Being's Ring", "Infinity Band", "World Tear Pendant", "Void Essence"],
    },
    ItemType.CONSUMABLE: {
        Rarity.COMMON: ["Health Potion", "Mana Potion", "Bread", "Water Flask"],
        Rarity.RARE: ["Greater Health Potion", "Elixir of Strength", "Mana Crystal", "Stamina Tonic"],
        Rarity.EPIC: ["Full Recovery Potion", "Buff Scroll", "Stat Reset Ticket", "XP Boost (1hr)"],
        Rarity.LEGENDARY: ["Instant Dungeon Key", "Skill Book", "Awakening Stone", "Miracle Elixir"],
        Rarity.MYTHIC: ["Shadow Extract", "Dimensional Rift Key", "Job Change Stone", "Monarch's Blessing"],
    },
}

ITEM_DESCRIPTIONS: dict[ItemType, dict[Rarity, list[str]]] = {
    ItemType.WEAPON: {
        Rarity.COMMON: [
            "A standard issue weapon, mass-produced for city guards.",
            "Simple but reliable throughout the early stages of hunting.",
            "Shows signs of wear, but the edge is still keen enough.",
            "A beginner's weapon. Better than fighting with bare hands.",
        ],
        Rarity.RARE: [
            "Forged with superior steel, it hums slightly when swung.",
            "A weapon of fine craftsmanship, balanced perfectly for combat.",
            "Etched with minor runes to enhance its durability.",
            "Preferred by B-rank hunters for its reliability.",
        ],
        Rarity.EPIC: [
            "Radiates a faint magical aura visible to those with high Intelligence.",
            "Crafted from monster bones and reinforced with magic.",
            "A weapon that has tasted the blood of high-ranking beasts.",
            "Vibrates with energy, longing for battle.",
        ],
        Rarity.LEGENDARY: [
            "A masterpiece that seems to move on its own accord.",
            "Forged in the breath of a dragon, it sears the air around it.",
            "Legends say this weapon once felled a Titan.",
            "Its power is so great it requires a strong will to wield.",
        ],
        Rarity.MYTHIC: [
            "A weapon that defies the laws of physics. It cuts through reality itself.",
            "Contains the soul of a vanquished Monarch.",
            "Merely looking at it strikes fear into the hearts of monsters.",
            "The pinnacle of destruction, created by the Absolute Being.",
        ],
    },
    ItemType.ARMOR: {
        Rarity.COMMON: [
            "Basic protection against minor scratches and bites.",
            "Made of treated leather and iron scraps.",
            "Lightweight, but don't expect it to stop a heavy blow.",
            "Standard hunter gear found in local shops.",
        ],
        Rarity.RARE: [
            "Reinforced with mana-hardened steel plates.",
            "Offers decent protection without sacrificing mobility.",
            "A sturdy set of armor that has seen many battles.",
            "Designed to deflect claws and fangs of mid-tier beasts.",
        ],
        Rarity.EPIC: [
            "Scales of a dungeon boss make up the core of this armor.",
            "Enchanted to reduce the weight while increasing defense.",
            "Glows softly when attacked, absorbing impact energy.",
            "Worn by elite assault team members.",
        ],
        Rarity.LEGENDARY: [
            "Impervious to normal steel. Only magic can scratch it.",
            "Forged from the hide of an Ancient Dragon.",
            "Slowly mends its own dents and tears over time.",
            "A legendary defense that turns its wearer into a fortress.",
        ],
        Rarity.MYTHIC: [
            "Armor woven from shadows and void energy.",
            "Physical attacks seem to phase right through it.",
            "The ultimate defense, rejecting all malice directed at it.",
            "You feel invincible while wearing this divine vestment.",
        ],
    },
    ItemType.ACCESSORY: {
        Rarity.COMMON: [
            "A simple charm sold for good luck.",
            "Made of polished stone. It looks nice.",
            "A small trinket that offers a tiny boost.",
            "Common jewelry modified to hold a little mana.",
        ],
        Rarity.RARE: [
            "Contains a small mana crystal that pulses steadily.",
            "Helps stabilize the flow of magic in the body.",
            "A silver piece enhanced by an enchanter.",
            "Found in the hoard of a Goblin Champion.",
        ],
        Rarity.EPIC: [
            "An ancient artifact recovered from a Red Gate.",
            "Significantly amplifies the wearer's magical presence.",
            "Warm to the touch, it wards off mental fatigue.",
            "A jeweled accessory that shines with inner light.",
        ],
        Rarity.LEGENDARY: [
            "Allows the user to store immense amounts of mana.",
            "A royal heirloom from a fallen kingdom inside a Gate.",
            "Time seems to move slower for the wearer.",
            "Grants power usually reserved for National Level Hunters.",
        ],
        Rarity.MYTHIC: [
            "A fragment of the World Tree, endless energy flows from it.",
            "Connects the wearer directly to the mana stream.",
            "An artifact that can rewrite the laws of luck.",
            "The cosmos seems to align for whoever wears this.",
        ],
    },
    ItemType.CONSUMABLE: {
        Rarity.COMMON: [
            "Tastes like stale bread, but restores health.",
            "A bitter liquid that numbs pain.",
            "Standard rations for dungeon raids.",
            "Basic first-aid supplies.",
        ],
        Rarity.RARE: [
            "A glowing blue liquid that refreshes the mind.",
            "Potent herbs compressed into a pill.",
            "Instantly closes minor wounds.",
            "A drink that revitalizes stamina immediately.",
        ],
        Rarity.EPIC: [
            "Golden elixir that cures all ailments.",
            "A scroll containing a powerful one-time spell.",
            "Restores a large amount of mana in seconds.",
            "Can regrow lost limbs if used immediately.",
        ],
        Rarity.LEGENDARY: [
            'The "Elixir of Life" sought by many.',
            "Unlocks dormant potential within the body.",
            "A crystal that grants a permanent stat boost.",
            "Said to revive a hunter who has only just fallen.",
        ],
        Rarity.MYTHIC: [
            "Essence of a god. Consuming this transcends humanity.",
            "A drop of the Shadow Monarch's blood.",
            "Grants knowledge of the universe.",
            "Transforms the body into a vessel of pure mana.",
        ],
    },
}
