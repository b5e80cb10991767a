from screenshot_agent.cli import main

main()
