"""Static tables: constants, dwelling archetypes, retrofit measures, subsidy programmes."""
