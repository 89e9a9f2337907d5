"""SkillMarket: skill-exchange marketplace backend."""
