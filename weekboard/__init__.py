"""weekboard - weekly team task and capacity tracker."""
