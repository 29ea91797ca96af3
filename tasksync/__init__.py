"""Task sharing API: personal tasks with subtasks, due dates and synchronized sharing."""
