def bgmi_profile(version="v1"):
  # keyword families and noise phrases as they appear in OCR of the lobby / result screens
  return {
    "keywords": {
      "elimination": ["eliminat"],
      "finish": ["finish"],
      "remaining": ["remaining"]
    },
    "lobby_noise": [r"^\d*\s*remaining\b", r"^team\s+\d+$", r"^stage\b", r"^match\s+start"],
    "result_noise": [r"continue", r"^stage"],
    "boundary_marker": "---IMAGE BREAK---",
    "thresholds": {
      "candidate": 0.65,
      "assign": 0.60
    },
    "similarity_metric": "dice",
    "fold_confusables": True,
    "rows_per_slot": 6,
    "max_roster": 6,
    "id_range": [1, 60],
    "max_bare_name_length": 32,
    "empty_sentinel": '""',
    "reset_state_on_boundary": False
  }


PROFILES = {
  "v1": bgmi_profile,
}
