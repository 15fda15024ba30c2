"""Testing helpers – fakes for exercising the bridge without real infrastructure."""
